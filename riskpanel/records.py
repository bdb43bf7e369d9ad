"""Value objects for the month x area panel and its derived records."""

from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from riskpanel.utils.exceptions import RecordSchemaError

# Columns recomputed on every call; never carried over from an input mapping
_DERIVED_FIELDS = frozenset({'alert_spike', 'alert_trend3', 'alert_level'})


class AlertLevel(str, Enum):
    NONE = 'none'
    WATCH = 'watch'
    WARNING = 'warning'

    @classmethod
    def from_signal_count(cls, n: int) -> 'AlertLevel':
        if n <= 0:
            return cls.NONE
        if n == 1:
            return cls.WATCH
        return cls.WARNING


def optional_number(value: Any) -> Optional[float]:
    """Normalize a risk value: None, NaN and pandas NA all mean "no data"."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return None
    return float(value)


def _count(value: Any) -> int:
    if value is None:
        return 0
    try:
        if pd.isna(value):
            return 0
    except (TypeError, ValueError):
        pass
    return int(value)


# Flag spellings accepted from upstream files
_TRUE_FLAGS = frozenset({'true', 't', 'yes', 'y', '1'})


def _flag(value: Any) -> bool:
    if value is None:
        return False
    try:
        if pd.isna(value):
            return False
    except (TypeError, ValueError):
        pass
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_FLAGS
    return bool(value)


@dataclass(frozen=True)
class PanelRecord:
    area_id: str
    month: str
    area_name: Optional[str] = None
    theft_count: int = 0
    exposure: float = 0.0
    risk_index: Optional[float] = None
    stability_flag: bool = False
    # left out of the hash so records stay hashable; still compared for equality
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> 'PanelRecord':
        """Build a record from a flat mapping; unknown keys are kept in ``extra``."""
        if mapping.get('area_id') is None or not mapping.get('month'):
            raise RecordSchemaError(f'Panel record needs area_id and month: {dict(mapping)!r}')
        known = {f.name for f in fields(cls)} - {'extra'}
        area_name = mapping.get('area_name')
        return cls(
            area_id=mapping['area_id'],
            month=str(mapping['month']),
            area_name=None if area_name is None or pd.isna(area_name) else str(area_name),
            theft_count=_count(mapping.get('theft_count')),
            exposure=optional_number(mapping.get('exposure')) or 0.0,
            risk_index=optional_number(mapping.get('risk_index')),
            stability_flag=_flag(mapping.get('stability_flag')),
            extra={k: v for k, v in mapping.items() if k not in known and k not in _DERIVED_FIELDS},
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = {k: v for k, v in asdict(self).items() if k != 'extra'}
        payload.update(self.extra)
        return payload


@dataclass(frozen=True)
class EnrichedRecord(PanelRecord):
    alert_spike: bool = False
    alert_trend3: bool = False
    alert_level: AlertLevel = AlertLevel.NONE

    @classmethod
    def from_panel(cls, record: PanelRecord, spike: bool, trend3: bool) -> 'EnrichedRecord':
        level = AlertLevel.from_signal_count(int(spike) + int(trend3))
        return cls(
            area_id=record.area_id,
            month=record.month,
            area_name=record.area_name,
            theft_count=record.theft_count,
            exposure=record.exposure,
            risk_index=record.risk_index,
            stability_flag=record.stability_flag,
            extra=record.extra,
            alert_spike=bool(spike),
            alert_trend3=bool(trend3),
            alert_level=level,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload['alert_level'] = self.alert_level.value
        return payload


@dataclass(frozen=True)
class DeltaRecord:
    area_id: str
    area_name: str
    delta_risk_index: Optional[float]
    delta_count: int
    risk_index_a: Optional[float]
    risk_index_b: Optional[float]
    theft_count_a: int = 0
    theft_count_b: int = 0
    alert_level: AlertLevel = AlertLevel.NONE
    stability_flag: bool = False

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload['alert_level'] = self.alert_level.value
        return payload


def as_panel_record(record: Any) -> PanelRecord:
    if isinstance(record, PanelRecord):
        return record
    if isinstance(record, Mapping):
        return PanelRecord.from_mapping(record)
    raise RecordSchemaError(f'Unsupported panel record type: {type(record).__name__}')


def records_from_frame(df: Optional[pd.DataFrame]) -> List[PanelRecord]:
    """Convert a panel DataFrame into PanelRecords, in row order."""
    if df is None or df.empty:
        return []
    return [PanelRecord.from_mapping(row) for row in df.to_dict(orient='records')]


def records_to_frame(records: Iterable[Any]) -> pd.DataFrame:
    """Flatten records (any of the three kinds) into a DataFrame, in input order."""
    rows = [r.to_dict() for r in records]
    return pd.DataFrame(rows)


def is_number(value: Any) -> bool:
    """True for a real, non-NaN number; bools are not metrics."""
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, numbers.Real):
        return False
    return not math.isnan(float(value))
