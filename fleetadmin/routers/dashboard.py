# fleetadmin/routers/dashboard.py
import logging
from fastapi import APIRouter, Depends
from typing import Any, Dict

from fleetadmin.config import settings
from fleetadmin.core.charts import deliveries_by_week, weight_by_day
from fleetadmin.core.formatting import route_label, status_badge_variant
from fleetadmin.core.grouping import dashboard_metrics, rank_owners_by_weight
from fleetadmin.data.data_service import DataService, get_data_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", summary="Fleet metrics, chart series, top owners and recent deliveries")
def get_dashboard(service: DataService = Depends(get_data_service)) -> Dict[str, Any]:
    deliveries = service.get_deliveries()
    trucks = service.get_trucks()
    owners = service.get_owners()
    logger.info(f"Dashboard built from {len(deliveries)} deliveries, {len(trucks)} trucks, {len(owners)} owners")

    top_owners = [
        {
            "owner_id": o.get("owner_id"),
            "owner_name": o.get("owner_name"),
            "total_weight": round(o["total_weight"], 1),
        }
        for o in rank_owners_by_weight(owners, trucks, deliveries)[:settings.DASHBOARD_TOP_OWNERS_LIMIT]
    ]

    recent = [
        {
            "delivery_id": d.get("delivery_id"),
            "customer_name": d.get("customer_name"),
            "route": route_label(d),
            "delivery_status": d.get("delivery_status"),
            "status_variant": status_badge_variant(d.get("delivery_status")),
            "pickup_date": d.get("pickup_date"),
        }
        for d in deliveries[:settings.DASHBOARD_RECENT_LIMIT]
    ]

    return {
        "status": True,
        "metrics": dashboard_metrics(deliveries, trucks),
        "weight_by_day": weight_by_day(deliveries),
        "deliveries_by_week": deliveries_by_week(deliveries),
        "top_owners": top_owners,
        "recent_deliveries": recent,
    }
