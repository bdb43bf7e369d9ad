"""Comparison engine: per-area deltas between two months of enriched records."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from riskpanel.records import AlertLevel, DeltaRecord, EnrichedRecord
from riskpanel.utils.logger_config import setup_logger

logger = setup_logger(__name__, level='INFO')

DELTA_DECIMALS = 4


def _index_month(records: Iterable[EnrichedRecord], month: str) -> Dict[Any, EnrichedRecord]:
    return {r.area_id: r for r in records if r.month == month}


def _round_delta(value: float) -> float:
    # round() works on the exact binary value; exact ties go to even
    return round(value, DELTA_DECIMALS)


def compare_months(
    records: Optional[Iterable[EnrichedRecord]],
    month_a: Optional[str],
    month_b: Optional[str],
) -> List[DeltaRecord]:
    """
    Build one DeltaRecord per area present at month_a or month_b.

    Areas seen at month_a come first, in record order, followed by areas
    only present at month_b. A side that is missing contributes 0 to the
    counts and None to the risk values; delta_risk_index is None unless
    both sides have a risk_index.

    Comparing a month with itself returns an empty list.
    """
    if not records or not month_a or not month_b or month_a == month_b:
        return []

    records = list(records)
    by_area_a = _index_month(records, month_a)
    by_area_b = _index_month(records, month_b)

    area_ids = list(by_area_a)
    area_ids += [area_id for area_id in by_area_b if area_id not in by_area_a]

    deltas: List[DeltaRecord] = []
    for area_id in area_ids:
        a = by_area_a.get(area_id)
        b = by_area_b.get(area_id)

        risk_a = a.risk_index if a is not None else None
        risk_b = b.risk_index if b is not None else None
        count_a = a.theft_count if a is not None else 0
        count_b = b.theft_count if b is not None else 0

        if risk_a is not None and risk_b is not None:
            delta_risk = _round_delta(risk_b - risk_a)
        else:
            delta_risk = None

        area_name = next(
            (r.area_name for r in (a, b) if r is not None and r.area_name is not None),
            '',
        )

        deltas.append(DeltaRecord(
            area_id=area_id,
            area_name=area_name,
            delta_risk_index=delta_risk,
            delta_count=(count_b or 0) - (count_a or 0),
            risk_index_a=risk_a,
            risk_index_b=risk_b,
            theft_count_a=count_a or 0,
            theft_count_b=count_b or 0,
            alert_level=b.alert_level if b is not None else AlertLevel.NONE,
            stability_flag=bool(b.stability_flag) if b is not None else False,
        ))

    logger.debug(f'Compared {month_a} -> {month_b}: {len(deltas)} areas')
    return deltas
