"""Ranking selector: top-N records by a metric, optionally alerts only."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from riskpanel.config import DEFAULT_TOP_N
from riskpanel.records import AlertLevel, is_number
from riskpanel.utils.exceptions import ConfigError


def field_value(record: Any, name: str) -> Any:
    """Read a field from a record object or a plain mapping; None when absent."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def has_alert(record: Any) -> bool:
    level = field_value(record, 'alert_level')
    return bool(level) and level != AlertLevel.NONE


def rank_top_n(
    records: Optional[Iterable[Any]],
    metric: str,
    alerts_only: bool = False,
    n: int = DEFAULT_TOP_N,
) -> List[Any]:
    """
    Return the top ``n`` records by descending ``metric``.

    Records whose metric is missing, None or NaN are dropped, as are records
    without an alert when ``alerts_only`` is set. Ties keep their input
    order. The input is never modified.
    """
    if n < 0:
        raise ConfigError(f'n must be >= 0, got {n}')
    if not records:
        return []

    candidates = [r for r in records if is_number(field_value(r, metric))]
    if alerts_only:
        candidates = [r for r in candidates if has_alert(r)]

    # sorted() is stable, and stays stable with reverse=True
    ranked = sorted(candidates, key=lambda r: float(field_value(r, metric)), reverse=True)
    return ranked[:n]
