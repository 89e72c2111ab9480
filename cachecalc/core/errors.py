from __future__ import annotations
from typing import Any


class ValidationError(ValueError):
    """A configuration field violated one of the input rules.

    Carries the offending field, its value and the expected constraint so the
    caller can build its own message. Raised, never handled, by the core.
    """

    def __init__(self, field: str, value: Any, expected: str):
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(f"{field} must be {expected} (got {value!r})")


class InvalidCacheSize(ValidationError):
    def __init__(self, value: Any):
        super().__init__("cache_size_kb", value, "a power of two KB in [8, 8192]")


class InvalidBlockSize(ValidationError):
    def __init__(self, value: Any):
        super().__init__("block_size_bytes", value, "8, 16, 32, or 64 bytes")


class InvalidAssociativity(ValidationError):
    def __init__(self, value: Any):
        super().__init__("associativity", value, "1, 2, 4, 8, or 16")


class InvalidPhysicalMemory(ValidationError):
    def __init__(self, value: Any):
        super().__init__("physical_memory_mb", value, "a power of two MB in [128, 4096]")


class InvalidOsPercent(ValidationError):
    def __init__(self, value: Any):
        super().__init__("os_memory_percent", value, "between 0 and 100")


class InvalidTimeSlice(ValidationError):
    def __init__(self, value: Any):
        super().__init__("time_slice", value, "-1 (All) or >= 1")


class InvalidTraceCount(ValidationError):
    def __init__(self, value: Any):
        super().__init__("trace_files", value, "1 to 3 trace files")


class NonIntegerRowCount(ValidationError):
    def __init__(self, total_blocks: int, associativity: int):
        super().__init__(
            "associativity", associativity,
            f"a divisor of the block count ({total_blocks}) so rows are whole",
        )
        self.total_blocks = total_blocks


class RowCountNotPowerOfTwo(ValidationError):
    def __init__(self, total_rows: int):
        super().__init__("total_rows", total_rows, "a power of two")


class InvalidReplacementPolicy(ValidationError):
    def __init__(self, value: Any):
        super().__init__("replacement_policy", value, "RR or RND")


class InternalConsistencyError(RuntimeError):
    """Derivation hit a state that validation should have made impossible."""
