from __future__ import annotations
import math
from dataclasses import MISSING, dataclass, fields
from enum import Enum
from typing import Any, Tuple

from ..utils.bits import is_power_of_two
from .errors import (
    InvalidAssociativity,
    InvalidBlockSize,
    InvalidCacheSize,
    InvalidOsPercent,
    InvalidPhysicalMemory,
    InvalidReplacementPolicy,
    InvalidTimeSlice,
    InvalidTraceCount,
    NonIntegerRowCount,
    RowCountNotPowerOfTwo,
)

MIN_CACHE_KB = 8
MAX_CACHE_KB = 8192
BLOCK_SIZES = (8, 16, 32, 64)
ASSOCIATIVITIES = (1, 2, 4, 8, 16)
MIN_PHYS_MB = 128
MAX_PHYS_MB = 4096
MAX_TRACES = 3
TIME_SLICE_ALL = -1


class ReplacementPolicy(Enum):
    """Stored and reported only; nothing replays accesses."""
    ROUND_ROBIN = "RR"
    RANDOM = "RND"

    @property
    def label(self) -> str:
        return "Round Robin" if self is ReplacementPolicy.ROUND_ROBIN else "Random"

    @classmethod
    def coerce(cls, value: Any) -> Any:
        """Maps 'rr'/'rnd' (any case) or a member name to a policy.

        Unrecognised values are returned unchanged so the configuration
        check reports them in rule order.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            for policy in cls:
                if key in (policy.value, policy.name):
                    return policy
        return value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class Configuration:
    """An accepted cache / virtual-memory configuration.

    Building one runs every input rule, so an instance that exists always
    satisfies the arithmetic preconditions of the derivation pipeline.
    """
    cache_size_kb: int
    block_size_bytes: int
    associativity: int
    physical_memory_mb: int
    os_memory_percent: float
    trace_files: Tuple[str, ...]
    time_slice: int = TIME_SLICE_ALL
    replacement_policy: ReplacementPolicy = ReplacementPolicy.ROUND_ROBIN

    def __post_init__(self):
        traces = self.trace_files
        if traces is None:
            traces = ()
        elif isinstance(traces, str):
            traces = (traces,)
        object.__setattr__(self, "trace_files", tuple(traces))
        object.__setattr__(self, "replacement_policy",
                           ReplacementPolicy.coerce(self.replacement_policy))
        _check_rules(self)

    @property
    def num_traces(self) -> int:
        return len(self.trace_files)

    @property
    def cache_bytes(self) -> int:
        return self.cache_size_kb * 1024

    @property
    def total_blocks(self) -> int:
        return self.cache_bytes // self.block_size_bytes

    @property
    def total_rows(self) -> int:
        return self.total_blocks // self.associativity


CONFIG_FIELDS = tuple(f.name for f in fields(Configuration))
_REQUIRED_FIELDS = tuple(f.name for f in fields(Configuration) if f.default is MISSING)


def _check_rules(c: Configuration):
    # Order matters: the first failing rule is the one reported.
    kb = c.cache_size_kb
    if not (_is_int(kb) and MIN_CACHE_KB <= kb <= MAX_CACHE_KB and is_power_of_two(kb)):
        raise InvalidCacheSize(kb)

    if not (_is_int(c.block_size_bytes) and c.block_size_bytes in BLOCK_SIZES):
        raise InvalidBlockSize(c.block_size_bytes)

    if not (_is_int(c.associativity) and c.associativity in ASSOCIATIVITIES):
        raise InvalidAssociativity(c.associativity)

    mb = c.physical_memory_mb
    if not (_is_int(mb) and MIN_PHYS_MB <= mb <= MAX_PHYS_MB and is_power_of_two(mb)):
        raise InvalidPhysicalMemory(mb)

    pct = c.os_memory_percent
    if not (_is_real(pct) and not math.isnan(pct) and 0.0 <= pct <= 100.0):
        raise InvalidOsPercent(pct)

    ts = c.time_slice
    if not (_is_int(ts) and (ts == TIME_SLICE_ALL or ts >= 1)):
        raise InvalidTimeSlice(ts)

    if not 1 <= c.num_traces <= MAX_TRACES:
        raise InvalidTraceCount(c.num_traces)

    if c.total_blocks % c.associativity != 0:
        raise NonIntegerRowCount(c.total_blocks, c.associativity)

    if not is_power_of_two(c.total_rows):
        raise RowCountNotPowerOfTwo(c.total_rows)

    if not isinstance(c.replacement_policy, ReplacementPolicy):
        raise InvalidReplacementPolicy(c.replacement_policy)


def validate(raw: Any = None, **overrides) -> Configuration:
    """Turns raw inputs into an accepted Configuration.

    `raw` is any object exposing the Configuration field names as attributes
    (a SimConfig, an argparse Namespace). Keyword arguments override it.
    Raises the ValidationError subclass of the first violated rule.
    """
    values = {}
    if raw is not None:
        for name in CONFIG_FIELDS:
            if hasattr(raw, name):
                values[name] = getattr(raw, name)
    values.update(overrides)
    # Absent inputs fail their own rule rather than the constructor signature.
    for name in _REQUIRED_FIELDS:
        values.setdefault(name, None)
    return Configuration(**values)
