from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Any
from ..core.validator import Configuration, TIME_SLICE_ALL
from ..core.derive import DerivedMetrics, COST_PER_KB_USD, VIRTUAL_ENTRIES_PER_PROCESS
from . import viz

REPORT_TITLE = "Cache Simulator"


def generate_report_text(config: Configuration, metrics: DerivedMetrics) -> str:
    """Renders the configuration and its derived values as the console report."""
    lines = [REPORT_TITLE, "Trace File(s):"]
    lines.extend(config.trace_files)

    time_slice = "All" if config.time_slice == TIME_SLICE_ALL else str(config.time_slice)
    lines += [
        "***** Cache Input Parameters *****",
        f"Cache Size: {config.cache_size_kb} KB",
        f"Block Size: {config.block_size_bytes} bytes",
        f"Associativity: {config.associativity}",
        f"Replacement Policy: {config.replacement_policy.label}",
        f"Physical Memory: {config.physical_memory_mb} MB",
        f"Percent Memory Used by System: {config.os_memory_percent:.1f}%",
        f"Instructions / Time Slice: {time_slice}",
    ]

    lines += [
        "***** Cache Calculated Values *****",
        f"Total # Blocks: {metrics.total_blocks}",
        f"Tag Size: {metrics.tag_bits} bits (based on actual physical memory)",
        f"Index Size: {metrics.index_bits} bits",
        f"Total # Rows: {metrics.total_rows}",
        f"Overhead Size: {metrics.overhead_bytes} bytes",
        f"Implementation Memory Size: {metrics.implementation_kb:.2f} KB "
        f"({metrics.implementation_memory_bytes} bytes)",
        f"Cost: ${metrics.cost_usd:.2f} @ ${COST_PER_KB_USD:.2f} per KB",
    ]

    fraction = config.os_memory_percent / 100.0
    lines += [
        "***** Physical Memory Calculated Values *****",
        f"Number of Physical Pages: {metrics.total_physical_pages}",
        f"Number of Pages for System: {metrics.system_pages} "
        f"( {fraction:.2f} * {metrics.total_physical_pages} = {metrics.system_pages} )",
        f"Size of Page Table Entry: {metrics.page_table_entry_bits} bits "
        f"(1 valid bit, {metrics.page_table_entry_bits - 1} for PhysPage)",
        f"Total RAM for Page Table(s): {metrics.page_table_total_bytes} bytes "
        f"({VIRTUAL_ENTRIES_PER_PROCESS // 1024}K entries * {config.num_traces} .trc files "
        f"* {metrics.page_table_entry_bits} / 8)",
    ]
    return "\n".join(lines) + "\n"


def generate_report_json(config: Configuration, metrics: DerivedMetrics) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary from a configuration and its metrics."""
    m = metrics
    return {
        "config": {
            "cache_size_kb": config.cache_size_kb,
            "block_size_bytes": config.block_size_bytes,
            "associativity": config.associativity,
            "replacement_policy": config.replacement_policy.value,
            "physical_memory_mb": config.physical_memory_mb,
            "os_memory_percent": config.os_memory_percent,
            "time_slice": config.time_slice,
            "trace_files": list(config.trace_files),
        },
        "cache": {
            "total_blocks": m.total_blocks,
            "tag_bits": m.tag_bits,
            "index_bits": m.index_bits,
            "block_offset_bits": m.block_offset_bits,
            "total_rows": m.total_rows,
            "physical_address_bits": m.physical_address_bits,
            "overhead_bits": m.overhead_bits,
            "overhead_bytes": m.overhead_bytes,
            "data_bytes": m.implementation_memory_bytes - m.overhead_bytes,
            "implementation_memory_bytes": m.implementation_memory_bytes,
            "implementation_kb": m.implementation_kb,
            "cost_usd": m.cost_usd,
        },
        "physical_memory": {
            "total_physical_pages": m.total_physical_pages,
            "system_pages": m.system_pages,
            "page_table_entry_bits": m.page_table_entry_bits,
            "page_table_total_bits": m.page_table_total_bits,
            "page_table_total_bytes": m.page_table_total_bytes,
        },
    }


def generate_report(config: Configuration, metrics: DerivedMetrics, report_dir: str):
    """Generates all report artifacts."""
    report_data = generate_report_json(config, metrics)
    text = generate_report_text(config, metrics)
    output_dir = Path(report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    with open(output_dir / "report.txt", "w") as f:
        f.write(text)

    viz.export_memory_chart(report_data, str(output_dir / "report.html"))

    print(text, end="")
    print(viz.export_memory_ascii(report_data))
    print(f"\nReports generated in {output_dir.absolute()}")
