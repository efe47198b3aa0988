import math
import re
from typing import Any, Dict, Optional, Tuple

STATUS_VARIANTS = {
    "active": "success",
    "decharge": "success",
    "delivered": "success",
    "en_transit": "info",
    "planifie": "info",
    "maintenance": "warning",
    "retarde": "warning",
    "demobilise": "error",
    "annule": "error",
    "inactive": "error",
}


def status_badge_variant(status: Optional[str]) -> str:
    """Display variant shared by truck, driver and delivery statuses."""
    return STATUS_VARIANTS.get((status or "").lower(), "neutral")


def split_license_plate(plate: Optional[str]) -> Tuple[str, str, str]:
    """
    Splits a plate such as ``DK 1234 AB``, ``DK-1234-AB`` or ``DK1234AB`` into
    its prefix, number and suffix. Anything unrecognised is kept as the number.
    """
    clean = (plate or "").upper().strip()
    parts = [p for p in re.split(r"[\s-]+", clean) if p]

    if len(parts) >= 3:
        return parts[0], parts[1], parts[2]
    if len(parts) == 2:
        return parts[0], parts[1], ""
    if len(parts) == 1:
        match = re.match(r"^([A-Z]+)(\d+)([A-Z]+)?$", clean)
        if match:
            return match.group(1), match.group(2), match.group(3) or ""
        return "", parts[0], ""
    return "", "", ""


def route_label(delivery: Dict[str, Any]) -> str:
    pickup = (delivery.get("pickup_location") or "").split(" ")[0]
    destination = (delivery.get("delivery_location") or "").split(" ")[0]
    return f"{pickup} → {destination}"


def _round_half_up(value: float) -> int:
    # round() would send exact halves to the even neighbour
    return int(math.floor(value + 0.5))


def diesel_cost(liters: float, price_per_liter: float) -> int:
    return _round_half_up(liters * price_per_liter)


def diesel_liters(cost: Optional[float], price_per_liter: float) -> Optional[int]:
    if not cost or not price_per_liter:
        return None
    return _round_half_up(cost / price_per_liter)
