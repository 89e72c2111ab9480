import pytest
from cachecalc.core.validator import Configuration


@pytest.fixture
def scenario_fields():
    """Smallest legal cache on the smallest legal memory, one trace."""
    return dict(
        cache_size_kb=8,
        block_size_bytes=8,
        associativity=1,
        replacement_policy="RR",
        physical_memory_mb=128,
        os_memory_percent=10.0,
        time_slice=-1,
        trace_files=["t1"],
    )


@pytest.fixture
def scenario_config(scenario_fields):
    return Configuration(**scenario_fields)
