# fleetadmin/models.py
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OwnerType(str, Enum):
    INDIVIDUEL = "Individuel"
    ENTREPRISE = "Entreprise"


class TruckType(str, Enum):
    SEMI_REMORQUE = "Semi remorque"
    DIX_ROUES = "10 roues"
    DOUZE_ROUES = "12 roues"
    PLATEAU = "plateau"


class TruckStatus(str, Enum):
    ACTIVE = "active"
    EN_TRANSIT = "en_transit"
    MAINTENANCE = "maintenance"
    DEMOBILISE = "demobilise"


class DriverStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"


class DeliveryStatus(str, Enum):
    PLANIFIE = "Planifie"
    EN_TRANSIT = "en_transit"
    DECHARGE = "decharge"
    RETARDE = "Retarde"
    ANNULE = "annule"


# --- Owners ---

class OwnerCreate(BaseModel):
    owner_name: str
    owner_type: OwnerType = OwnerType.INDIVIDUEL
    phone_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None


class OwnerUpdate(BaseModel):
    owner_name: Optional[str] = None
    owner_type: Optional[OwnerType] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None


# --- Trucks ---

class TruckCreate(BaseModel):
    owner_id: int
    license_plate: str
    truck_model: Optional[str] = None
    truck_type: TruckType = TruckType.SEMI_REMORQUE
    capacity_kg: float = 0
    status: TruckStatus = TruckStatus.ACTIVE
    manufacture_year: Optional[int] = None
    insurance_expiry: Optional[date] = None
    last_service_date: Optional[date] = None


class TruckUpdate(BaseModel):
    owner_id: Optional[int] = None
    license_plate: Optional[str] = None
    truck_model: Optional[str] = None
    truck_type: Optional[TruckType] = None
    capacity_kg: Optional[float] = None
    status: Optional[TruckStatus] = None
    manufacture_year: Optional[int] = None
    insurance_expiry: Optional[date] = None
    last_service_date: Optional[date] = None


# --- Drivers ---

class DriverCreate(BaseModel):
    first_name: str
    last_name: str
    license_number: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    status: DriverStatus = DriverStatus.ACTIVE
    truck_id: Optional[int] = None


class DriverUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    license_number: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    status: Optional[DriverStatus] = None
    truck_id: Optional[int] = None # explicit null unassigns the driver


# --- Customers & locations ---

class CustomerCreate(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class LocationCreate(BaseModel):
    name: str
    address: Optional[str] = None
    location_type: Optional[str] = None
    distance_km: float = 0


class LocationUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    location_type: Optional[str] = None
    distance_km: Optional[float] = None


# --- Deliveries ---

class DeliveryCreate(BaseModel):
    truck_id: int
    customer_name: str = Field(..., min_length=1)
    driver_name: Optional[str] = None
    driver_license: Optional[str] = None
    delivery_location_id: Optional[int] = None
    pickup_location: Optional[str] = None
    delivery_location: Optional[str] = None
    pickup_date: datetime
    expected_delivery_date: datetime
    actual_delivery_date: Optional[datetime] = None
    cargo_description: Optional[str] = None
    cargo_weight_kg: Optional[float] = None
    distance_km: Optional[float] = None
    delivery_status: DeliveryStatus = DeliveryStatus.PLANIFIE
    notes: Optional[str] = None


class DeliveryUpdate(BaseModel):
    truck_id: Optional[int] = None
    customer_name: Optional[str] = None
    driver_name: Optional[str] = None
    driver_license: Optional[str] = None
    delivery_location_id: Optional[int] = None
    pickup_location: Optional[str] = None
    delivery_location: Optional[str] = None
    pickup_date: Optional[datetime] = None
    expected_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    cargo_description: Optional[str] = None
    cargo_weight_kg: Optional[float] = None
    distance_km: Optional[float] = None
    delivery_status: Optional[DeliveryStatus] = None
    notes: Optional[str] = None


class DeliveryStatusUpdate(BaseModel):
    delivery_status: DeliveryStatus
    actual_delivery_date: Optional[datetime] = None
    notes: Optional[str] = ""


class DeliveryExpenses(BaseModel):
    """Expense breakdown for one delivery; ``diesel_liters`` prices the fuel line."""

    frais_de_route: Optional[float] = None
    frais_gazoil: Optional[float] = None
    frais_de_payage: Optional[float] = None
    charge_journaliere: Optional[float] = None
    frais_divers: Optional[float] = None
    notes: Optional[str] = None
    diesel_liters: Optional[float] = Field(None, ge=0)
