# fleetadmin/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import uvicorn # For programmatic run, if needed

from fleetadmin.config import settings
from fleetadmin.routers import customers, dashboard, deliveries, drivers, locations, owners, trucks

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL.upper(),
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Fleet Admin API",
    description="Administration of truck owners, trucks, drivers, customers, routes and deliveries.",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_ORIGIN] if settings.FRONTEND_ORIGIN else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])
app.include_router(owners.router, prefix="/api/v1/owners", tags=["Owners"])
app.include_router(trucks.router, prefix="/api/v1/trucks", tags=["Trucks"])
app.include_router(drivers.router, prefix="/api/v1/drivers", tags=["Drivers"])
app.include_router(deliveries.router, prefix="/api/v1/deliveries", tags=["Deliveries"])
app.include_router(customers.router, prefix="/api/v1/customers", tags=["Customers"])
app.include_router(locations.router, prefix="/api/v1/locations", tags=["Locations"])

@app.get("/", tags=["Root"])
async def read_root():
    logger.info("Root endpoint was accessed.")
    return {"message": "Welcome to the Fleet Admin API!"}

def run():
    logger.info("Starting Uvicorn server on http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)

if __name__ == "__main__":
    run()
