import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)

FRENCH_WEEKDAYS = ["Lun", "Mar", "Mer", "Jeu", "Ven", "Sam", "Dim"]


def _today(today: Optional[date]) -> pd.Timestamp:
    return pd.Timestamp(today or date.today()).normalize()


def _deliveries_frame(deliveries: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """
    One row per delivery with a parsed pickup ``day`` (naive, UTC based) and a
    numeric ``cargo_weight_kg``. Deliveries without a usable pickup date are dropped.
    """
    frame = pd.DataFrame(list(deliveries), columns=["delivery_id", "pickup_date", "cargo_weight_kg"])
    if frame.empty:
        return frame.assign(day=pd.Series(dtype="datetime64[ns]"))

    dates = pd.to_datetime(frame["pickup_date"], errors="coerce", utc=True, format="ISO8601")
    frame["day"] = dates.dt.tz_localize(None).dt.normalize()
    frame["cargo_weight_kg"] = pd.to_numeric(frame["cargo_weight_kg"], errors="coerce").fillna(0)

    skipped = int(frame["day"].isna().sum())
    if skipped:
        logger.warning(f"Skipping {skipped} deliveries with a missing or invalid pickup_date for charts.")
    return frame.dropna(subset=["day"])


def weight_by_day(deliveries: Iterable[Dict[str, Any]], today: Optional[date] = None, days: int = 7) -> List[Dict[str, Any]]:
    """Cargo weight (kg) picked up on each of the last ``days`` days, oldest first."""
    end = _today(today)
    index = pd.date_range(end=end, periods=days, freq="D")

    frame = _deliveries_frame(deliveries)
    if frame.empty:
        weights = pd.Series(0.0, index=index)
    else:
        weights = frame.groupby("day")["cargo_weight_kg"].sum().reindex(index, fill_value=0)

    return [
        {
            "name": FRENCH_WEEKDAYS[day.weekday()],
            "date": day.date().isoformat(),
            "weight": float(weight),
        }
        for day, weight in weights.items()
    ]


def deliveries_by_week(deliveries: Iterable[Dict[str, Any]], today: Optional[date] = None, weeks: int = 4) -> List[Dict[str, Any]]:
    """
    Delivery counts in ``weeks`` consecutive 7-day windows ending today.
    ``Sem 1`` is the oldest window; pickups in the future are not counted.
    """
    end = _today(today)
    frame = _deliveries_frame(deliveries)

    counts = pd.Series(0, index=range(weeks))
    if not frame.empty:
        age_days = (end - frame["day"]).dt.days
        in_window = (age_days >= 0) & (age_days < weeks * 7)
        buckets = (weeks - 1) - age_days[in_window] // 7
        counts = buckets.value_counts().reindex(range(weeks), fill_value=0)

    chart = []
    for bucket, count in counts.items():
        window_end = end - pd.Timedelta(days=7 * (weeks - 1 - bucket))
        window_start = window_end - pd.Timedelta(days=6)
        chart.append({
            "name": f"Sem {bucket + 1}",
            "start": window_start.date().isoformat(),
            "end": window_end.date().isoformat(),
            "deliveries": int(count),
        })
    return chart
