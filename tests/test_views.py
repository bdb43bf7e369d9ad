import pytest

from conftest import make_area, month_label
from riskpanel.config import EngineSettings
from riskpanel.ranking import rank_top_n
from riskpanel.records import AlertLevel
from riskpanel.views import (
    MODE_COMPARE,
    DashboardView,
    count_alerts,
    default_month_pair,
    records_for_month,
    snap_threshold,
)


@pytest.fixture
def view(panel):
    return DashboardView(panel, settings=EngineSettings(top_n=2))


class TestHelpers:
    def test_records_for_month(self, panel):
        sliced = records_for_month(panel, month_label(1))
        assert [r.area_id for r in sliced] == ['E01', 'E02', 'E03']
        assert records_for_month(panel, '') == []
        assert records_for_month(None, month_label(1)) == []

    def test_count_alerts(self):
        rows = [{'alert_level': 'watch'}, {'alert_level': 'none'}, {}, {'alert_level': AlertLevel.WARNING}]
        assert count_alerts(rows) == 2
        assert count_alerts([]) == 0

    def test_count_matches_alerts_only_ranking(self):
        rows = [
            {'risk_index': 1.0, 'alert_level': 'watch'},
            {'risk_index': 2.0, 'alert_level': ''},
            {'risk_index': 3.0, 'alert_level': AlertLevel.NONE},
            {'risk_index': 4.0, 'alert_level': 'warning'},
        ]
        assert count_alerts(rows) == len(rank_top_n(rows, 'risk_index', alerts_only=True)) == 2

    def test_default_month_pair(self, months):
        assert default_month_pair(months) == (months[5], months[11])
        assert default_month_pair(months[:3]) == (months[0], months[2])
        assert default_month_pair([]) == (None, None)

    @pytest.mark.parametrize('raw, expected', [
        (0.5, 0.5),
        (0.33, 0.35),
        (0.01, 0.1),
        (4.0, 1.0),
        (0.999, 1.0),
    ])
    def test_snap_threshold(self, raw, expected):
        assert snap_threshold(raw) == expected


class TestDashboardView:
    def test_months_inferred_from_panel(self, view):
        assert view.months == [month_label(i) for i in range(8)]

    def test_enrichment_is_reused_per_threshold(self, view):
        first = view.enriched(0.5)
        assert view.enriched(0.5) is first
        assert view.enriched(0.2) is not first
        assert view.enriched(0.2) == view.enriched(0.2)

    def test_month_slice_defaults_to_latest(self, view):
        latest = view.top_n(threshold=0.5)
        assert [r.area_id for r in latest] == ['E02', 'E01']
        assert all(r.month == month_label(7) for r in latest)

    def test_alerts_only_ranking(self, view):
        ranked = view.top_n(threshold=0.5, month=month_label(7), alerts_only=True)
        assert [r.area_id for r in ranked] == ['E02', 'E01']
        assert all(r.alert_level != AlertLevel.NONE for r in ranked)

    def test_display_metric(self, view):
        ranked = view.top_n(threshold=0.5, month=month_label(7), display_metric='theft_count')
        assert ranked[0].area_id == 'E02'

    def test_compare_mode_uses_deltas(self, view):
        ranked = view.top_n(mode=MODE_COMPARE, month_a=month_label(0), month_b=month_label(7), threshold=0.5)
        assert [d.area_id for d in ranked] == ['E02', 'E01']
        assert ranked[0].delta_risk_index == 2.0

    def test_default_deltas(self, view):
        deltas = view.deltas(threshold=0.5)
        # opening pair is months[1] -> months[7]
        e01 = next(d for d in deltas if d.area_id == 'E01')
        assert (e01.risk_index_a, e01.risk_index_b) == (0.6, 1.2)
        e03 = next(d for d in deltas if d.area_id == 'E03')
        assert e03.delta_risk_index is None

    def test_alert_count(self, view):
        assert view.alert_count(month=month_label(7), threshold=0.5) == 2
        assert view.alert_count(mode=MODE_COMPARE, month_a=month_label(0), month_b=month_label(0)) == 0
