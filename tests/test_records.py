import numpy as np
import pandas as pd
import pytest

from riskpanel.alerts import recompute_alerts
from riskpanel.records import (
    AlertLevel,
    PanelRecord,
    records_from_frame,
    records_to_frame,
)
from riskpanel.utils.exceptions import RecordSchemaError


@pytest.fixture
def row():
    return {
        'area_id': 'E09000007',
        'area_name': 'Camden',
        'month': '2024-03',
        'theft_count': 42,
        'exposure': 310,
        'risk_index': 1.18,
        'risk_ratio': 0.135,
    }


class TestFromMapping:
    def test_known_and_passthrough_fields(self, row):
        record = PanelRecord.from_mapping(row)
        assert record.theft_count == 42
        assert record.exposure == 310.0
        assert record.extra == {'risk_ratio': 0.135}
        assert record.to_dict()['risk_ratio'] == 0.135

    def test_missing_risk_stays_absent(self, row):
        for missing in (None, np.nan, pd.NA):
            record = PanelRecord.from_mapping({**row, 'risk_index': missing})
            assert record.risk_index is None

    def test_needs_area_and_month(self, row):
        with pytest.raises(RecordSchemaError):
            PanelRecord.from_mapping({k: v for k, v in row.items() if k != 'month'})
        with pytest.raises(RecordSchemaError):
            PanelRecord.from_mapping({**row, 'area_id': None})

    @pytest.mark.parametrize('raw, expected', [
        ('true', True),
        ('True', True),
        ('1', True),
        ('false', False),
        ('', False),
        (True, True),
        (0, False),
        (1, True),
        (np.nan, False),
        (None, False),
    ])
    def test_stability_flag_spellings(self, row, raw, expected):
        record = PanelRecord.from_mapping({**row, 'stability_flag': raw})
        assert record.stability_flag is expected

    def test_stale_alert_columns_dropped(self, row):
        record = PanelRecord.from_mapping({**row, 'alert_level': 'warning', 'alert_spike': True})
        assert 'alert_level' not in record.extra
        assert 'alert_spike' not in record.extra


class TestHashing:
    def test_records_are_hashable(self, row):
        record = PanelRecord.from_mapping(row)
        assert hash(record) == hash(PanelRecord.from_mapping(row))

    def test_enriched_records_usable_as_keys(self, row):
        enriched = recompute_alerts([PanelRecord.from_mapping(row)], 0.5)
        cache = {enriched[0]: 'seen'}
        assert cache[recompute_alerts([PanelRecord.from_mapping(row)], 0.5)[0]] == 'seen'
        assert len(set(enriched + enriched)) == 1


class TestFrames:
    def test_frame_roundtrip_keeps_order(self, row):
        df = pd.DataFrame([{**row, 'month': '2024-04'}, row])
        records = records_from_frame(df)
        assert [r.month for r in records] == ['2024-04', '2024-03']
        assert list(records_to_frame(records)['month']) == ['2024-04', '2024-03']

    def test_empty_frame(self):
        assert records_from_frame(None) == []
        assert records_from_frame(pd.DataFrame()) == []

    def test_alert_level_from_signal_count(self):
        assert [AlertLevel.from_signal_count(n) for n in range(3)] == [
            AlertLevel.NONE, AlertLevel.WATCH, AlertLevel.WARNING,
        ]
