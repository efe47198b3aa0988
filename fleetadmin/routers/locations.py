# fleetadmin/routers/locations.py
import logging
from fastapi import APIRouter, Depends, status
from typing import Any, Dict

from fleetadmin.data.data_service import DataService, get_data_service
from fleetadmin.models import LocationCreate, LocationUpdate
from fleetadmin.routers.common import backend_http_error
from fleetadmin.services.table_client import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", summary="List delivery routes, newest first")
def list_locations(service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    return {"status": True, "message": "Locations retrieved successfully", "locations": service.get_locations()}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a delivery route")
def create_location(location: LocationCreate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        created = service.add_location(location.model_dump(mode="json"))
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": "Location added successfully", "location": created}


@router.put("/{location_id}", summary="Update a delivery route")
def update_location(location_id: int, updates: LocationUpdate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        updated = service.update_location(location_id, updates.model_dump(mode="json", exclude_unset=True))
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": "Location updated successfully", "location": updated}


@router.delete("/{location_id}", summary="Delete a delivery route")
def delete_location(location_id: int, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        service.delete_location(location_id)
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": f"Location '{location_id}' deleted."}
