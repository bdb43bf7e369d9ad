import sys
from pathlib import Path

import pytest

# Make the package importable without an install
sys.path.insert(0, str(Path(__file__).parent.parent))

from riskpanel.records import PanelRecord


def month_label(i, start_year=2024):
    return f"{start_year + i // 12}-{i % 12 + 1:02d}"


def make_area(area_id, risks, counts=None, area_name=None, start=0):
    """One area's records, one per month starting at month index ``start``."""
    counts = counts or [10] * len(risks)
    return [
        PanelRecord(
            area_id=area_id,
            area_name=area_name or f"Area {area_id}",
            month=month_label(start + i),
            theft_count=counts[i],
            exposure=100.0,
            risk_index=risk,
        )
        for i, risk in enumerate(risks)
    ]


@pytest.fixture
def months():
    return [month_label(i) for i in range(12)]


@pytest.fixture
def panel():
    # E01 rises steadily, E02 is flat then jumps, E03 has gaps
    return (
        make_area('E01', [0.5, 0.6, 0.7, 0.8, 0.9, 1.0, 1.1, 1.2])
        + make_area('E02', [1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 3.0], counts=[5, 5, 5, 5, 5, 5, 5, 20])
        + make_area('E03', [None, 1.0, None, 1.1, None, 1.2, 1.3, None])
    )
