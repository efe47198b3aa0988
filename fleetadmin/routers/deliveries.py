# fleetadmin/routers/deliveries.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, Dict, Optional

from fleetadmin.config import settings
from fleetadmin.core.formatting import diesel_cost, diesel_liters, route_label, status_badge_variant
from fleetadmin.core.grouping import active_driver_for_truck, expenses_total, group_deliveries_by_owner
from fleetadmin.data.data_service import DataService, get_data_service
from fleetadmin.models import DeliveryCreate, DeliveryExpenses, DeliveryStatusUpdate, DeliveryUpdate
from fleetadmin.routers.common import backend_http_error
from fleetadmin.services.table_client import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"status": False, "message": message})


def _apply_location(payload: Dict[str, Any], service: DataService, current: Optional[Dict[str, Any]] = None) -> None:
    """Fills route fields left empty, by the caller and in ``current``, from the chosen route template."""
    location_id = payload.get("delivery_location_id")
    if not location_id:
        return

    location = next((l for l in service.get_locations() if l.get("location_id") == location_id), None)
    if location is None:
        raise _bad_request(f"Destination '{location_id}' introuvable.")

    current = current or {}
    template = {
        "pickup_location": location.get("address") or "",
        "delivery_location": location.get("name"),
        "distance_km": location.get("distance_km"),
    }
    for field, value in template.items():
        if not payload.get(field) and not current.get(field):
            payload[field] = value


def _apply_driver(payload: Dict[str, Any], service: DataService) -> None:
    """The truck's active driver is the default driver of the delivery."""
    if payload.get("driver_name"):
        return
    driver = active_driver_for_truck(service.get_drivers(), payload["truck_id"])
    if driver:
        payload["driver_name"] = f"{driver.get('first_name')} {driver.get('last_name')}"
        payload["driver_license"] = payload.get("driver_license") or driver.get("license_number")
    else:
        logger.info(f"No active driver assigned to truck {payload['truck_id']}.")


@router.get("", summary="Deliveries grouped by truck owner with carried tonnage")
def list_deliveries(service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    deliveries = [
        {
            **d,
            "status_variant": status_badge_variant(d.get("delivery_status")),
            "route": route_label(d),
        }
        for d in service.get_deliveries()
    ]
    return {
        "status": True,
        "message": "Deliveries retrieved successfully",
        "deliveries": deliveries,
        "by_owner": group_deliveries_by_owner(deliveries),
    }


@router.post("", status_code=status.HTTP_201_CREATED, summary="Plan a delivery")
def create_delivery(delivery: DeliveryCreate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    payload = delivery.model_dump(mode="json")

    try:
        truck = service.get_truck(delivery.truck_id)
    except BackendError as e:
        raise backend_http_error(e, f"Impossible de charger le camion: {e.message}")
    if truck is None:
        raise _bad_request(f"Camion '{delivery.truck_id}' introuvable.")
    if truck.get("status") == "maintenance":
        raise _bad_request(f"Le camion {truck.get('license_plate')} est en maintenance.")

    _apply_location(payload, service)
    _apply_driver(payload, service)

    try:
        created = service.add_delivery(payload)
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    logger.info(f"Delivery created: {created.get('delivery_id')} for customer '{delivery.customer_name}'")
    return {"status": True, "message": "Delivery added successfully", "delivery": created}


@router.put("/{delivery_id}", summary="Edit a delivery")
def update_delivery(delivery_id: int, updates: DeliveryUpdate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    payload = updates.model_dump(mode="json", exclude_unset=True)
    if "customer_name" in payload and not payload["customer_name"]:
        raise _bad_request("Le client est obligatoire.")
    if "truck_id" in payload and payload["truck_id"] is None:
        raise _bad_request("Le camion est obligatoire.")

    try:
        current = service.get_delivery(delivery_id)
    except BackendError as e:
        raise backend_http_error(e, f"Impossible de charger la livraison: {e.message}")
    if current is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"status": False, "message": f"Livraison '{delivery_id}' introuvable."},
        )

    # Defaults only complete what is stored; a new truck brings its own driver
    _apply_location(payload, service, current)
    if "truck_id" in payload and payload["truck_id"] != current.get("truck_id") and "driver_name" not in payload:
        _apply_driver(payload, service)

    try:
        updated = service.update_delivery(delivery_id, payload)
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": "Delivery updated successfully", "delivery": updated}


@router.patch("/{delivery_id}/status", summary="Record progress of a delivery")
def update_delivery_status(delivery_id: int, update: DeliveryStatusUpdate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    payload = update.model_dump(mode="json")
    try:
        updated = service.update_delivery(delivery_id, payload)
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    logger.info(f"Delivery {delivery_id} moved to status '{update.delivery_status.value}'")
    return {"status": True, "message": "Delivery status updated successfully", "delivery": updated}


@router.delete("/{delivery_id}", summary="Delete a delivery")
def delete_delivery(delivery_id: int, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    logger.info(f"Delete delivery endpoint called with ID: {delivery_id}")
    try:
        service.delete_delivery(delivery_id)
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": f"Delivery '{delivery_id}' deleted."}


@router.get("/{delivery_id}/expenses", summary="Expense breakdown of a delivery")
def get_delivery_expenses(delivery_id: int, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        detail = service.get_delivery_detail(delivery_id)
    except BackendError as e:
        raise backend_http_error(e, f"Impossible de charger les détails: {e.message}")

    return {
        "status": True,
        "delivery_id": delivery_id,
        "detail": detail,
        "total": expenses_total(detail),
        "diesel_liters": diesel_liters((detail or {}).get("frais_gazoil"), settings.DIESEL_PRICE_PER_LITER),
    }


@router.put("/{delivery_id}/expenses", summary="Save the expense breakdown of a delivery")
def save_delivery_expenses(delivery_id: int, expenses: DeliveryExpenses, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        existing = service.get_delivery_detail(delivery_id)
    except BackendError as e:
        raise backend_http_error(e, f"Impossible de charger les détails: {e.message}")

    changes = expenses.model_dump(mode="json", exclude_unset=True, exclude={"diesel_liters"})
    if expenses.diesel_liters is not None and "frais_gazoil" not in changes:
        changes["frais_gazoil"] = diesel_cost(expenses.diesel_liters, settings.DIESEL_PRICE_PER_LITER)

    detail = {**(existing or {}), **changes, "delivery_id": delivery_id}
    try:
        saved = service.save_delivery_detail(detail)
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")

    return {
        "status": True,
        "message": "Expenses saved successfully",
        "detail": saved,
        "total": expenses_total(saved),
    }
