# fleetadmin/routers/customers.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, Dict

from fleetadmin.data.data_service import DataService, get_data_service
from fleetadmin.models import CustomerCreate, CustomerUpdate
from fleetadmin.routers.common import backend_http_error
from fleetadmin.services.table_client import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", summary="List customers, newest first")
def list_customers(service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    customers = service.get_customers()
    used_names = service.get_used_customer_names()
    for customer in customers:
        customer["in_use"] = customer.get("name") in used_names
    return {"status": True, "message": "Customers retrieved successfully", "customers": customers}


@router.get("/used-names", summary="Customer names referenced by deliveries")
def list_used_customer_names(service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    return {"status": True, "names": sorted(n for n in service.get_used_customer_names() if n)}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a customer")
def create_customer(customer: CustomerCreate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        created = service.add_customer(customer.model_dump(mode="json"))
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": "Customer added successfully", "customer": created}


@router.put("/{customer_id}", summary="Update a customer")
def update_customer(customer_id: int, updates: CustomerUpdate, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    try:
        updated = service.update_customer(customer_id, updates.model_dump(mode="json", exclude_unset=True))
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": "Customer updated successfully", "customer": updated}


@router.delete("/{customer_id}", summary="Delete a customer no delivery refers to")
def delete_customer(customer_id: int, service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    logger.info(f"Delete customer endpoint called with ID: {customer_id}")
    customer = next((c for c in service.get_customers() if c.get("customer_id") == customer_id), None)
    if customer and customer.get("name") in service.get_used_customer_names():
        logger.warning(f"Customer '{customer_id}' is referenced by deliveries. Refusing deletion.")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"status": False, "message": f"Le client '{customer.get('name')}' est utilisé par des livraisons."}
        )

    try:
        service.delete_customer(customer_id)
    except BackendError as e:
        raise backend_http_error(e, f"Erreur: {e.message}")
    return {"status": True, "message": f"Customer '{customer_id}' deleted."}
