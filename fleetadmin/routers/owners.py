# fleetadmin/routers/owners.py
import logging
from fastapi import APIRouter, Depends, status
from typing import Any, Dict

from fleetadmin.core.grouping import owner_fleet_summary
from fleetadmin.data.data_service import DataService, get_data_service
from fleetadmin.models import OwnerCreate, OwnerUpdate
from fleetadmin.routers.common import backend_http_error
from fleetadmin.services.table_client import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", summary="List truck owners, newest first")
def list_owners(service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    owners = service.get_owners()
    return {"status": True, "message": "Owners retrieved successfully", "owners": owners}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a truck owner")
def create_owner(owner: OwnerCreate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        created = service.add_owner(owner.model_dump(mode="json"))
    except BackendError as e:
        raise backend_http_error(e, "Une erreur est survenue lors de l'enregistrement.")
    logger.info(f"Owner created: {created.get('owner_id')}")
    return {"status": True, "message": "Owner added successfully", "owner": created}


@router.put("/{owner_id}", summary="Update a truck owner")
def update_owner(owner_id: int, updates: OwnerUpdate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        updated = service.update_owner(owner_id, updates.model_dump(mode="json", exclude_unset=True))
    except BackendError as e:
        raise backend_http_error(e, "Une erreur est survenue lors de l'enregistrement.")
    return {"status": True, "message": "Owner updated successfully", "owner": updated}


@router.delete("/{owner_id}", summary="Delete a truck owner")
def delete_owner(owner_id: int, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    logger.info(f"Delete owner endpoint called with ID: {owner_id}")
    try:
        service.delete_owner(owner_id)
    except BackendError as e:
        raise backend_http_error(e, "Impossible de supprimer : vérifiez s'il a des camions assignés.")
    return {"status": True, "message": f"Owner '{owner_id}' deleted."}


@router.get("/{owner_id}/fleet", summary="Trucks of an owner with capacity and activity totals")
def get_owner_fleet(owner_id: int, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    summary = owner_fleet_summary(service.get_trucks(), owner_id)
    return {"status": True, "message": "Fleet retrieved successfully", "owner_id": owner_id, **summary}
