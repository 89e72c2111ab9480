from __future__ import annotations
import argparse
import json
import sys
from ..config import SimConfig
from ..core.derive import derive
from ..core.errors import ValidationError
from ..utils.logging import get_logger
from ..utils.reporting import generate_report, generate_report_json, generate_report_text

logger = get_logger("cachecalc")


def _accept(args, parser):
    """Builds and validates the configuration; accepted is None after a rejection."""
    config = SimConfig.from_args(args)
    try:
        return config, config.validate()
    except ValidationError as e:
        logger.error(str(e))
        parser.print_usage(sys.stderr)
        return config, None


def cmd_check(args):
    """Handles the 'check' command."""
    _, accepted = _accept(args, args.parser)
    if accepted is None:
        return 1
    print(f"[OK] Configuration is valid ({accepted.total_rows} rows, "
          f"{accepted.num_traces} trace file(s))")
    return 0


def cmd_run(args):
    """Handles the 'run' command."""
    config, accepted = _accept(args, args.parser)
    if accepted is None:
        return 1

    metrics = derive(accepted)

    if config.report_dir:
        generate_report(accepted, metrics, config.report_dir)
    elif args.json:
        print(json.dumps(generate_report_json(accepted, metrics), indent=4))
    else:
        print(generate_report_text(accepted, metrics), end="")
    return 0


def _add_input_args(p):
    p.add_argument("-c", "--config", type=str, default=None,
                   help="Path to YAML config file to override defaults")

    cache_group = p.add_argument_group('Cache Arguments')
    cache_group.add_argument("-s", "--cache-size", type=int, default=None, dest="cache_size_kb",
                             help="Cache size in KB (power of two, 8..8192)")
    cache_group.add_argument("-b", "--block-size", type=int, default=None, dest="block_size_bytes",
                             help="Block size in bytes (8, 16, 32, 64)")
    cache_group.add_argument("-a", "--associativity", type=int, default=None,
                             help="Associativity (1, 2, 4, 8, 16)")
    cache_group.add_argument("-r", "--replacement", type=str, default=None, dest="replacement_policy",
                             help="Replacement policy: RR (round robin) or RND (random)")

    mem_group = p.add_argument_group('Physical Memory Arguments')
    mem_group.add_argument("-p", "--physical-memory", type=int, default=None, dest="physical_memory_mb",
                           help="Physical memory in MB (power of two, 128..4096)")
    mem_group.add_argument("-u", "--os-percent", type=float, default=None, dest="os_memory_percent",
                           help="Percent of physical memory used by the OS (0..100)")

    run_group = p.add_argument_group('Trace Arguments')
    run_group.add_argument("-n", "--time-slice", type=int, default=None, dest="time_slice",
                           help="Instructions per time slice, -1 for All")
    run_group.add_argument("-f", "--trace", action="append", default=None, dest="trace_files",
                           help="Trace file; repeat for up to 3 files")


def build_parser():
    p = argparse.ArgumentParser(
        prog="cachecalc",
        description="Cache and virtual memory parameter calculator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Validate the configuration and report derived values",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    _add_input_args(pr)
    pr.add_argument("--report", type=str, default=None,
                    help="Directory to save report.json, report.txt and report.html")
    pr.add_argument("--json", action="store_true",
                    help="Print the report as JSON instead of text")
    pr.set_defaults(func=cmd_run, parser=pr)

    # --- Check Command ---
    pc = sub.add_parser("check", help="Only validate the configuration",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    _add_input_args(pc)
    pc.set_defaults(func=cmd_check, parser=pc)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
