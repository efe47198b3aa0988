# fleetadmin/data/data_service.py

import json
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Set

from fleetadmin.core.grouping import expenses_total
from fleetadmin.services.table_client import BackendError, TableClient, build_table_client

logger = logging.getLogger(__name__)

OWNERS_TABLE = "truck_owners"
TRUCKS_TABLE = "trucks"
DRIVERS_TABLE = "drivers"
CUSTOMERS_TABLE = "customers"
LOCATIONS_TABLE = "locations"
DELIVERIES_TABLE = "deliveries"
DETAILS_TABLE = "detail_deliveries"

EXPENSE_COLUMNS = "id_detail_livraison, frais_de_route, frais_gazoil, frais_de_payage, charge_journaliere, frais_divers"

# Joined or derived keys that never go back to the backend
TRUCK_HELPER_FIELDS = ("owner_name", "truck_owners")
DRIVER_HELPER_FIELDS = ("truck_plate", "trucks")
DELIVERY_HELPER_FIELDS = ("owner_name", "owner_id", "has_details", "total_expenses")


def _strip(record: Dict[str, Any], keys) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if k not in keys}


def _embedded_one(value: Any) -> Optional[Dict[str, Any]]:
    """An embedded relation comes back either as an object or a list of objects."""
    if isinstance(value, list):
        return value[0] if value else None
    if isinstance(value, dict):
        return value
    return None


def _location_from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    location = dict(row)
    location["distance_km"] = location.pop("location_distance", None)
    return location


def _log_read_error(what: str, error: BackendError) -> None:
    logger.error(f"Error fetching {what}: {json.dumps(error.to_dict())}")


class DataService:
    """Facade over the remote tables: reads fall back to empty, writes raise."""

    def __init__(self, client: TableClient):
        self.client = client

    # --- OWNERS ---

    def get_owners(self) -> List[Dict[str, Any]]:
        try:
            return self.client.select(OWNERS_TABLE, order="owner_id", descending=True)
        except BackendError as e:
            _log_read_error("owners", e)
            return []

    def add_owner(self, owner: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.insert(OWNERS_TABLE, owner)

    def update_owner(self, owner_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.update(OWNERS_TABLE, updates, {"owner_id": owner_id})

    def delete_owner(self, owner_id: int) -> bool:
        self.client.delete(OWNERS_TABLE, {"owner_id": owner_id})
        return True

    # --- TRUCKS ---

    def get_trucks(self) -> List[Dict[str, Any]]:
        try:
            rows = self.client.select(TRUCKS_TABLE, columns="*, truck_owners (owner_name)")
        except BackendError as e:
            _log_read_error("trucks", e)
            return []

        trucks = []
        for row in rows:
            owner = _embedded_one(row.get("truck_owners"))
            truck = _strip(row, ("truck_owners",))
            truck["owner_name"] = owner.get("owner_name") if owner else None
            trucks.append(truck)
        return trucks

    def get_truck(self, truck_id: int) -> Optional[Dict[str, Any]]:
        try:
            return self.client.maybe_single(TRUCKS_TABLE, filters={"truck_id": truck_id})
        except BackendError as e:
            _log_read_error("truck", e)
            raise

    def add_truck(self, truck: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.insert(TRUCKS_TABLE, _strip(truck, TRUCK_HELPER_FIELDS))

    def update_truck(self, truck_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.update(TRUCKS_TABLE, _strip(updates, TRUCK_HELPER_FIELDS), {"truck_id": truck_id})

    def delete_truck(self, truck_id: int) -> bool:
        self.client.delete(TRUCKS_TABLE, {"truck_id": truck_id})
        return True

    # --- DRIVERS ---

    def get_drivers(self) -> List[Dict[str, Any]]:
        try:
            rows = self.client.select(DRIVERS_TABLE, columns="*, trucks (license_plate)")
        except BackendError as e:
            _log_read_error("drivers", e)
            return []

        drivers = []
        for row in rows:
            truck = _embedded_one(row.get("trucks"))
            driver = _strip(row, ("trucks",))
            driver["truck_plate"] = truck.get("license_plate") if truck else None
            drivers.append(driver)
        return drivers

    def add_driver(self, driver: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.insert(DRIVERS_TABLE, _strip(driver, DRIVER_HELPER_FIELDS))

    def update_driver(self, driver_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.update(DRIVERS_TABLE, _strip(updates, DRIVER_HELPER_FIELDS), {"driver_id": driver_id})

    def delete_driver(self, driver_id: int) -> bool:
        self.client.delete(DRIVERS_TABLE, {"driver_id": driver_id})
        return True

    # --- CUSTOMERS ---

    def get_customers(self) -> List[Dict[str, Any]]:
        try:
            return self.client.select(CUSTOMERS_TABLE, order="customer_id", descending=True)
        except BackendError as e:
            _log_read_error("customers", e)
            return []

    def get_used_customer_names(self) -> Set[str]:
        """Names referenced by at least one delivery; those customers must not be deleted."""
        try:
            rows = self.client.select(DELIVERIES_TABLE, columns="customer_name")
        except BackendError as e:
            _log_read_error("used customers", e)
            return set()
        return {row.get("customer_name") for row in rows}

    def add_customer(self, customer: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.insert(CUSTOMERS_TABLE, customer)

    def update_customer(self, customer_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.update(CUSTOMERS_TABLE, updates, {"customer_id": customer_id})

    def delete_customer(self, customer_id: int) -> bool:
        self.client.delete(CUSTOMERS_TABLE, {"customer_id": customer_id})
        return True

    # --- LOCATIONS ---

    def get_locations(self) -> List[Dict[str, Any]]:
        try:
            rows = self.client.select(LOCATIONS_TABLE, order="location_id", descending=True)
        except BackendError as e:
            _log_read_error("locations", e)
            return []
        return [_location_from_row(row) for row in rows]

    def add_location(self, location: Dict[str, Any]) -> Dict[str, Any]:
        payload = {
            "name": location.get("name"),
            "address": location.get("address"),
            "location_type": location.get("location_type"),
            "location_distance": location.get("distance_km"),
        }
        return _location_from_row(self.client.insert(LOCATIONS_TABLE, payload))

    def update_location(self, location_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        payload = {}
        for key in ("name", "address", "location_type"):
            if key in updates:
                payload[key] = updates[key]
        if "distance_km" in updates:
            payload["location_distance"] = updates["distance_km"]
        row = self.client.update(LOCATIONS_TABLE, payload, {"location_id": location_id})
        return _location_from_row(row)

    def delete_location(self, location_id: int) -> bool:
        self.client.delete(LOCATIONS_TABLE, {"location_id": location_id})
        return True

    # --- DELIVERIES ---

    def _truck_owner_map(self) -> Optional[Dict[Any, Optional[Dict[str, Any]]]]:
        try:
            rows = self.client.select(TRUCKS_TABLE, columns="truck_id, truck_owners (owner_id, owner_name)")
        except BackendError as e:
            _log_read_error("trucks for delivery join", e)
            return None
        return {row.get("truck_id"): _embedded_one(row.get("truck_owners")) for row in rows}

    def get_deliveries(self) -> List[Dict[str, Any]]:
        try:
            rows = self.client.select(
                DELIVERIES_TABLE,
                columns=f"*, detail_deliveries({EXPENSE_COLUMNS})",
                order="delivery_id",
                descending=True,
            )
        except BackendError as e:
            _log_read_error("deliveries", e)
            return []

        if not rows:
            return []

        # Deliveries are still returned without owner info when this join fails
        owner_by_truck = self._truck_owner_map() or {}

        deliveries = []
        for row in rows:
            details = row.get("detail_deliveries")
            has_details = isinstance(details, list) and len(details) > 0
            owner = owner_by_truck.get(row.get("truck_id"))

            delivery = _strip(row, ("detail_deliveries",))
            delivery["has_details"] = has_details
            delivery["total_expenses"] = expenses_total(details[0]) if has_details else None
            delivery["owner_id"] = owner.get("owner_id") if owner else None
            delivery["owner_name"] = owner.get("owner_name") if owner else None
            deliveries.append(delivery)
        return deliveries

    def get_delivery(self, delivery_id: int) -> Optional[Dict[str, Any]]:
        """Stored row of one delivery, without joins. Errors are raised."""
        try:
            return self.client.maybe_single(DELIVERIES_TABLE, filters={"delivery_id": delivery_id})
        except BackendError as e:
            _log_read_error("delivery", e)
            raise

    def add_delivery(self, delivery: Dict[str, Any]) -> Dict[str, Any]:
        payload = _strip(delivery, DELIVERY_HELPER_FIELDS)
        payload["cargo_weight_kg"] = delivery.get("cargo_weight_kg") or None
        payload["distance_km"] = delivery.get("distance_km") or None
        payload["cargo_description"] = delivery.get("cargo_description") or None
        payload["delivery_location_id"] = delivery.get("delivery_location_id") or None
        return self.client.insert(DELIVERIES_TABLE, payload)

    def update_delivery(self, delivery_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        payload = _strip(updates, DELIVERY_HELPER_FIELDS)
        for key in ("cargo_weight_kg", "distance_km"):
            if key in payload and payload[key] in ("", 0):
                payload[key] = None
        return self.client.update(DELIVERIES_TABLE, payload, {"delivery_id": delivery_id})

    def delete_delivery(self, delivery_id: int) -> bool:
        self.client.delete(DELIVERIES_TABLE, {"delivery_id": delivery_id})
        return True

    # --- DELIVERY DETAILS (EXPENSES) ---

    def get_delivery_detail(self, delivery_id: int) -> Optional[Dict[str, Any]]:
        try:
            return self.client.maybe_single(DETAILS_TABLE, filters={"delivery_id": delivery_id})
        except BackendError as e:
            _log_read_error("delivery detail", e)
            raise

    def save_delivery_detail(self, detail: Dict[str, Any]) -> Dict[str, Any]:
        detail_id = detail.get("id_detail_livraison")
        if detail_id:
            return self.client.update(DETAILS_TABLE, detail, {"id_detail_livraison": detail_id})
        return self.client.insert(DETAILS_TABLE, _strip(detail, ("id_detail_livraison",)))


@lru_cache(maxsize=1)
def get_data_service() -> DataService:
    """Process-wide facade used as a FastAPI dependency."""
    return DataService(build_table_client())
