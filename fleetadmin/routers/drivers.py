# fleetadmin/routers/drivers.py
import logging
from fastapi import APIRouter, Depends, Query, status
from typing import Any, Dict, Optional

from fleetadmin.core.formatting import status_badge_variant
from fleetadmin.core.grouping import split_driver_assignments
from fleetadmin.data.data_service import DataService, get_data_service
from fleetadmin.models import DriverCreate, DriverUpdate
from fleetadmin.routers.common import backend_http_error
from fleetadmin.services.table_client import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", summary="Drivers split into active assignments (by owner) and the unassigned pool")
def list_drivers(
    owner_id: Optional[int] = Query(None, description="Only keep assignments on trucks of this owner"),
    service: DataService = Depends(get_data_service),
) -> Dict[str, Any]:
    drivers = [
        {**d, "status_variant": status_badge_variant(d.get("status"))}
        for d in service.get_drivers()
    ]
    trucks = service.get_trucks()
    split = split_driver_assignments(drivers, trucks, owner_id=owner_id)
    return {
        "status": True,
        "message": "Drivers retrieved successfully",
        "drivers": drivers,
        **split,
    }


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register a driver")
def create_driver(driver: DriverCreate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        created = service.add_driver(driver.model_dump(mode="json"))
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": "Driver added successfully", "driver": created}


@router.put("/{driver_id}", summary="Update a driver or (re)assign their truck")
def update_driver(driver_id: int, updates: DriverUpdate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        updated = service.update_driver(driver_id, updates.model_dump(mode="json", exclude_unset=True))
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": "Driver updated successfully", "driver": updated}


@router.delete("/{driver_id}", summary="Delete a driver")
def delete_driver(driver_id: int, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    logger.info(f"Delete driver endpoint called with ID: {driver_id}")
    try:
        service.delete_driver(driver_id)
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": f"Driver '{driver_id}' deleted."}
