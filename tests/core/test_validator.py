import dataclasses
import pytest
from cachecalc.core.validator import (
    Configuration, ReplacementPolicy, validate, BLOCK_SIZES, ASSOCIATIVITIES,
)
from cachecalc.core.errors import (
    ValidationError,
    InvalidCacheSize,
    InvalidBlockSize,
    InvalidAssociativity,
    InvalidPhysicalMemory,
    InvalidOsPercent,
    InvalidTimeSlice,
    InvalidTraceCount,
    NonIntegerRowCount,
    RowCountNotPowerOfTwo,
    InvalidReplacementPolicy,
)


def test_valid_configuration(scenario_config):
    assert scenario_config.cache_size_kb == 8
    assert scenario_config.trace_files == ("t1",)
    assert scenario_config.replacement_policy is ReplacementPolicy.ROUND_ROBIN
    assert scenario_config.total_rows == 1024


def test_configuration_is_immutable(scenario_config):
    with pytest.raises(dataclasses.FrozenInstanceError):
        scenario_config.cache_size_kb = 16


def test_cache_size_sweep(scenario_fields):
    """Every power of two in [8, 8192] passes the cache-size rule, nothing else does."""
    scenario_fields.update(block_size_bytes=64, associativity=16)
    powers = {2**i for i in range(3, 14)}
    for kb in range(8, 8193):
        scenario_fields["cache_size_kb"] = kb
        if kb in powers:
            assert validate(**scenario_fields).cache_size_kb == kb
        else:
            with pytest.raises(InvalidCacheSize):
                validate(**scenario_fields)


@pytest.mark.parametrize("kb", [4, 16384, 0, -8, 8.0, None])
def test_cache_size_out_of_range(scenario_fields, kb):
    scenario_fields["cache_size_kb"] = kb
    with pytest.raises(InvalidCacheSize):
        validate(**scenario_fields)


@pytest.mark.parametrize("block", [4, 12, 128, 0])
def test_invalid_block_size(scenario_fields, block):
    scenario_fields["block_size_bytes"] = block
    with pytest.raises(InvalidBlockSize):
        validate(**scenario_fields)


@pytest.mark.parametrize("assoc", [0, 3, 32, True])
def test_invalid_associativity(scenario_fields, assoc):
    scenario_fields["associativity"] = assoc
    with pytest.raises(InvalidAssociativity):
        validate(**scenario_fields)


@pytest.mark.parametrize("mb", [64, 8192, 192, 1000])
def test_invalid_physical_memory(scenario_fields, mb):
    scenario_fields["physical_memory_mb"] = mb
    with pytest.raises(InvalidPhysicalMemory):
        validate(**scenario_fields)


@pytest.mark.parametrize("pct", [-0.1, 100.5, float("nan"), "10"])
def test_invalid_os_percent(scenario_fields, pct):
    scenario_fields["os_memory_percent"] = pct
    with pytest.raises(InvalidOsPercent):
        validate(**scenario_fields)


@pytest.mark.parametrize("pct", [0, 0.0, 55.5, 100])
def test_os_percent_bounds_are_inclusive(scenario_fields, pct):
    scenario_fields["os_memory_percent"] = pct
    assert validate(**scenario_fields).os_memory_percent == pct


@pytest.mark.parametrize("ts", [0, -2, -100])
def test_invalid_time_slice(scenario_fields, ts):
    scenario_fields["time_slice"] = ts
    with pytest.raises(InvalidTimeSlice):
        validate(**scenario_fields)


@pytest.mark.parametrize("ts", [-1, 1, 500000])
def test_valid_time_slice(scenario_fields, ts):
    scenario_fields["time_slice"] = ts
    assert validate(**scenario_fields).time_slice == ts


@pytest.mark.parametrize("traces", [[], ["a", "b", "c", "d"]])
def test_invalid_trace_count(scenario_fields, traces):
    scenario_fields["trace_files"] = traces
    with pytest.raises(InvalidTraceCount):
        validate(**scenario_fields)


def test_single_trace_string_is_one_trace(scenario_fields):
    scenario_fields["trace_files"] = "Trace1.trc"
    assert validate(**scenario_fields).trace_files == ("Trace1.trc",)


@pytest.mark.parametrize("raw, expected", [
    ("rr", ReplacementPolicy.ROUND_ROBIN),
    ("RND", ReplacementPolicy.RANDOM),
    ("random", ReplacementPolicy.RANDOM),
    (ReplacementPolicy.RANDOM, ReplacementPolicy.RANDOM),
])
def test_replacement_policy_coercion(scenario_fields, raw, expected):
    scenario_fields["replacement_policy"] = raw
    assert validate(**scenario_fields).replacement_policy is expected


def test_invalid_replacement_policy(scenario_fields):
    scenario_fields["replacement_policy"] = "lru"
    with pytest.raises(InvalidReplacementPolicy):
        validate(**scenario_fields)


def test_associativity_checked_before_divisibility(scenario_fields):
    """associativity=3 is reported as such, not as a row-count problem."""
    scenario_fields["associativity"] = 3
    with pytest.raises(InvalidAssociativity) as exc:
        validate(**scenario_fields)
    assert not isinstance(exc.value, (NonIntegerRowCount, RowCountNotPowerOfTwo))


def test_first_violated_rule_wins(scenario_fields):
    # given several bad fields at once
    scenario_fields.update(cache_size_kb=7, block_size_bytes=3, associativity=5,
                           physical_memory_mb=1, os_memory_percent=200,
                           time_slice=0, trace_files=[])

    # then the reported rule follows the fixed order as fields are fixed
    order = [
        ("cache_size_kb", 8, InvalidCacheSize),
        ("block_size_bytes", 8, InvalidBlockSize),
        ("associativity", 1, InvalidAssociativity),
        ("physical_memory_mb", 128, InvalidPhysicalMemory),
        ("os_memory_percent", 1.0, InvalidOsPercent),
        ("time_slice", -1, InvalidTimeSlice),
        ("trace_files", ["t1"], InvalidTraceCount),
    ]
    for field_name, good_value, error in order:
        with pytest.raises(error):
            validate(**scenario_fields)
        scenario_fields[field_name] = good_value
    assert validate(**scenario_fields).total_rows == 1024


def test_validate_reads_attributes_from_raw_object(scenario_fields):
    class Raw:
        pass

    raw = Raw()
    for key, value in scenario_fields.items():
        setattr(raw, key, value)
    config = validate(raw, associativity=2)
    assert config.associativity == 2
    assert config.total_rows == 512


def test_validate_missing_fields_fail_their_rule():
    with pytest.raises(InvalidBlockSize):
        validate(cache_size_kb=8)
    with pytest.raises(InvalidCacheSize):
        validate()


def test_every_accepted_configuration_has_power_of_two_rows(scenario_fields):
    for kb in (2**i for i in range(3, 14)):
        for block in BLOCK_SIZES:
            for assoc in ASSOCIATIVITIES:
                scenario_fields.update(cache_size_kb=kb, block_size_bytes=block, associativity=assoc)
                rows = validate(**scenario_fields).total_rows
                assert rows > 0 and rows & (rows - 1) == 0


def test_validation_error_carries_context(scenario_fields):
    scenario_fields["block_size_bytes"] = 12
    with pytest.raises(ValidationError) as exc:
        validate(**scenario_fields)
    err = exc.value
    assert isinstance(err, ValueError)
    assert err.field == "block_size_bytes"
    assert err.value == 12
    assert "8, 16, 32, or 64" in err.expected
    assert "block_size_bytes" in str(err)


def test_geometry_errors_describe_rows():
    err = NonIntegerRowCount(total_blocks=1024, associativity=3)
    assert err.total_blocks == 1024
    assert err.field == "associativity"
    assert "1024" in str(err)

    err = RowCountNotPowerOfTwo(total_rows=48)
    assert err.field == "total_rows"
    assert err.value == 48
