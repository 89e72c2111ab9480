from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict

from ..utils.bits import ceil_div, ilog2, round_half_away
from ..utils.logging import get_logger
from .errors import InternalConsistencyError
from .validator import Configuration

PAGE_SIZE_BYTES = 4096
COST_PER_KB_USD = 0.07
# 512K virtual page-table entries per process, whatever the physical size.
VIRTUAL_ENTRIES_PER_PROCESS = 512 * 1024

logger = get_logger(__name__)


@dataclass(frozen=True)
class DerivedMetrics:
    """Cache geometry, overhead/cost and paging figures for one Configuration."""
    # Cache
    total_blocks: int
    tag_bits: int
    index_bits: int
    block_offset_bits: int
    total_rows: int
    overhead_bits: int
    overhead_bytes: int
    implementation_memory_bytes: int
    implementation_kb: float
    cost_usd: float
    physical_address_bits: int

    # Physical memory / paging
    total_physical_pages: int
    system_pages: int
    page_table_entry_bits: int
    page_table_total_bits: int
    page_table_total_bytes: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def derive(config: Configuration) -> DerivedMetrics:
    """Computes DerivedMetrics for an accepted Configuration.

    Steps run in a fixed order since later figures build on earlier ones.
    Raises InternalConsistencyError if the tag width comes out negative,
    which a validated Configuration cannot produce.
    """
    # 1. Geometry
    cache_bytes = config.cache_size_kb * 1024
    total_blocks = cache_bytes // config.block_size_bytes
    total_rows = total_blocks // config.associativity

    # 2. Address decomposition against the physical address width
    physical_bytes = config.physical_memory_mb * 1024 * 1024
    phys_addr_bits = ilog2(physical_bytes)
    block_offset_bits = ilog2(config.block_size_bytes)
    index_bits = ilog2(total_rows)

    # 3.
    tag_bits = phys_addr_bits - index_bits - block_offset_bits
    if tag_bits < 0:
        raise InternalConsistencyError(
            f"negative tag bits ({tag_bits}) for {config.cache_size_kb} KB cache, "
            f"{config.block_size_bytes} B blocks, {config.physical_memory_mb} MB memory"
        )

    # 4. One valid bit plus the tag for every way of every row
    overhead_bits = total_rows * config.associativity * (1 + tag_bits)
    overhead_bytes = ceil_div(overhead_bits, 8)

    # 5.
    impl_bytes = cache_bytes + overhead_bytes
    impl_kb = impl_bytes / 1024.0
    cost = impl_kb * COST_PER_KB_USD

    # 6. Paging
    phys_pages = physical_bytes // PAGE_SIZE_BYTES
    sys_pages = round_half_away(config.os_memory_percent / 100.0 * phys_pages)

    # 7.
    pte_bits = 1 + ilog2(phys_pages)

    # 8.
    pgt_bits = VIRTUAL_ENTRIES_PER_PROCESS * config.num_traces * pte_bits
    pgt_bytes = ceil_div(pgt_bits, 8)

    logger.debug(
        f"derived rows={total_rows} tag={tag_bits} index={index_bits} "
        f"offset={block_offset_bits} pte={pte_bits}"
    )

    return DerivedMetrics(
        total_blocks=total_blocks,
        tag_bits=tag_bits,
        index_bits=index_bits,
        block_offset_bits=block_offset_bits,
        total_rows=total_rows,
        overhead_bits=overhead_bits,
        overhead_bytes=overhead_bytes,
        implementation_memory_bytes=impl_bytes,
        implementation_kb=impl_kb,
        cost_usd=cost,
        physical_address_bits=phys_addr_bits,
        total_physical_pages=phys_pages,
        system_pages=sys_pages,
        page_table_entry_bits=pte_bits,
        page_table_total_bits=pgt_bits,
        page_table_total_bytes=pgt_bytes,
    )
