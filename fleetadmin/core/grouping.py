import logging
from typing import Any, Dict, Iterable, List, Optional

from fleetadmin.config import settings

logger = logging.getLogger(__name__)

EXPENSE_FIELDS = ("frais_de_route", "frais_gazoil", "frais_de_payage", "charge_journaliere", "frais_divers")
ACTIVE_TRUCK_STATUSES = ("active", "en_transit")


def _kg_to_tonnes(weight_kg: float) -> float:
    return weight_kg / 1000


def expenses_total(detail: Optional[Dict[str, Any]]) -> float:
    """Sum of the five expense lines of a delivery detail; missing lines count as 0."""
    if not detail:
        return 0
    return sum(detail.get(field) or 0 for field in EXPENSE_FIELDS)


def group_by_owner(records: Iterable[Dict[str, Any]], unknown_label: Optional[str] = None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Groups records (trucks, deliveries, driver assignments) by their ``owner_name``.
    Insertion order of first appearance is kept; records without an owner land
    under the unknown label.
    """
    unknown_label = unknown_label or settings.UNKNOWN_OWNER_LABEL
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for record in records:
        owner = record.get("owner_name") or unknown_label
        grouped.setdefault(owner, []).append(record)
    return grouped


def owner_fleet(trucks: Iterable[Dict[str, Any]], owner_id: int) -> List[Dict[str, Any]]:
    return [t for t in trucks if t.get("owner_id") == owner_id]


def owner_fleet_summary(trucks: Iterable[Dict[str, Any]], owner_id: int) -> Dict[str, Any]:
    fleet = owner_fleet(trucks, owner_id)
    total_capacity = sum(float(t.get("capacity_kg") or 0) for t in fleet)
    return {
        "trucks": fleet,
        "truck_count": len(fleet),
        "total_capacity_tonnes": round(_kg_to_tonnes(total_capacity), 1),
        "active_trucks": sum(1 for t in fleet if t.get("status") == "active"),
    }


def active_driver_for_truck(drivers: Iterable[Dict[str, Any]], truck_id: int) -> Optional[Dict[str, Any]]:
    for driver in drivers:
        if driver.get("truck_id") == truck_id and driver.get("status") == "active":
            return driver
    return None


def split_driver_assignments(
    drivers: List[Dict[str, Any]],
    trucks: List[Dict[str, Any]],
    owner_id: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Splits drivers into the unassigned pool and active assignments.

    Assigned drivers are enriched with the owner of their truck, optionally
    filtered on that owner, and grouped by owner name. The owner filter never
    applies to the unassigned pool.
    """
    trucks_by_id = {t.get("truck_id"): t for t in trucks}

    unassigned = [d for d in drivers if not d.get("truck_id")]

    assignments = []
    for driver in drivers:
        if not driver.get("truck_id"):
            continue
        truck = trucks_by_id.get(driver["truck_id"])
        assignments.append({
            **driver,
            "owner_name": (truck or {}).get("owner_name") or settings.UNKNOWN_OWNER_LABEL,
            "owner_id": (truck or {}).get("owner_id"),
        })

    if owner_id is not None:
        assignments = [d for d in assignments if d.get("owner_id") == owner_id]

    return {
        "unassigned": unassigned,
        "assignments": group_by_owner(assignments),
        "assigned_count": len(assignments),
    }


def group_deliveries_by_owner(deliveries: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    groups = []
    for owner_name, items in group_by_owner(deliveries).items():
        total_weight = sum(d.get("cargo_weight_kg") or 0 for d in items)
        groups.append({
            "owner_name": owner_name,
            "total_weight_tonnes": round(_kg_to_tonnes(total_weight), 1),
            "deliveries": items,
        })
    return groups


def rank_owners_by_weight(
    owners: Iterable[Dict[str, Any]],
    trucks: List[Dict[str, Any]],
    deliveries: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """Owners with the tonnage carried by their trucks, heaviest first."""
    ranking = []
    for owner in owners:
        truck_ids = {t.get("truck_id") for t in owner_fleet(trucks, owner.get("owner_id"))}
        weight = sum(d.get("cargo_weight_kg") or 0 for d in deliveries if d.get("truck_id") in truck_ids)
        ranking.append({**owner, "total_weight": _kg_to_tonnes(weight)})
    ranking.sort(key=lambda o: o["total_weight"], reverse=True)
    return ranking


def dashboard_metrics(deliveries: List[Dict[str, Any]], trucks: List[Dict[str, Any]]) -> Dict[str, Any]:
    total_weight = sum(d.get("cargo_weight_kg") or 0 for d in deliveries)
    active_trucks = sum(1 for t in trucks if t.get("status") in ACTIVE_TRUCK_STATUSES)
    logger.debug(f"Dashboard metrics over {len(deliveries)} deliveries and {len(trucks)} trucks")
    return {
        "total_weight_tonnes": round(_kg_to_tonnes(total_weight), 1),
        "total_deliveries": len(deliveries),
        "active_trucks": active_trucks,
    }
