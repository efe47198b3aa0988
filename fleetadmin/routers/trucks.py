# fleetadmin/routers/trucks.py
import logging
from fastapi import APIRouter, Depends, status
from typing import Any, Dict

from fleetadmin.core.formatting import split_license_plate, status_badge_variant
from fleetadmin.core.grouping import group_by_owner
from fleetadmin.data.data_service import DataService, get_data_service
from fleetadmin.models import TruckCreate, TruckUpdate
from fleetadmin.routers.common import backend_http_error
from fleetadmin.services.table_client import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


def _for_display(truck: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **truck,
        "status_variant": status_badge_variant(truck.get("status")),
        "plate_parts": list(split_license_plate(truck.get("license_plate"))),
    }


@router.get("", summary="List trucks, flat and grouped by owner")
def list_trucks(service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    trucks = [_for_display(t) for t in service.get_trucks()]
    return {
        "status": True,
        "message": "Trucks retrieved successfully",
        "trucks": trucks,
        "by_owner": group_by_owner(trucks),
    }


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register a truck")
def create_truck(truck: TruckCreate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        created = service.add_truck(truck.model_dump(mode="json"))
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    logger.info(f"Truck created: {created.get('truck_id')} ({created.get('license_plate')})")
    return {"status": True, "message": "Truck added successfully", "truck": created}


@router.put("/{truck_id}", summary="Update a truck")
def update_truck(truck_id: int, updates: TruckUpdate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        updated = service.update_truck(truck_id, updates.model_dump(mode="json", exclude_unset=True))
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": "Truck updated successfully", "truck": updated}


@router.delete("/{truck_id}", summary="Delete a truck")
def delete_truck(truck_id: int, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    logger.info(f"Delete truck endpoint called with ID: {truck_id}")
    try:
        service.delete_truck(truck_id)
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": f"Truck '{truck_id}' deleted."}
