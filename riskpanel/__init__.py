"""Alerting, comparison and ranking over a month x area risk panel."""

from .records import (
    AlertLevel,
    PanelRecord,
    EnrichedRecord,
    DeltaRecord,
    records_from_frame,
    records_to_frame,
)
from .alerts import recompute_alerts, recompute_alerts_frame, alert_summary
from .comparison import compare_months
from .ranking import rank_top_n
from .views import (
    DashboardView,
    records_for_month,
    count_alerts,
    default_month_pair,
    snap_threshold,
)
from .config import EngineSettings, load_settings

__all__ = [
    'AlertLevel',
    'PanelRecord',
    'EnrichedRecord',
    'DeltaRecord',
    'records_from_frame',
    'records_to_frame',
    'recompute_alerts',
    'recompute_alerts_frame',
    'alert_summary',
    'compare_months',
    'rank_top_n',
    'DashboardView',
    'records_for_month',
    'count_alerts',
    'default_month_pair',
    'snap_threshold',
    'EngineSettings',
    'load_settings',
]
