from datetime import UTC, datetime

import pytest

from domain.models.currency import Rate, RateGraph

FIXED_NOW = datetime(2025, 9, 27, 10, 30, tzinfo=UTC)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_graph():
    """Build a RateGraph from ``{'USD-VES': 36.5, ...}``."""
    def _make(values: dict[str, float], provider: str = 'Test') -> RateGraph:
        graph = RateGraph()
        for key, value in values.items():
            base, quote = key.split('-')
            graph.add(Rate(base=base, quote=quote, value=value, provider=provider, at=FIXED_NOW))
        return graph
    return _make
