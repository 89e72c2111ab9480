from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import yaml
from pathlib import Path

from .core.validator import Configuration, validate, TIME_SLICE_ALL
from .utils.logging import get_logger

logger = get_logger(__name__)

# CLI dest names that differ from the field they fill.
_ARG_ALIASES = {
    "trace": "trace_files",
    "report": "report_dir",
}


@dataclass
class SimConfig:
    """Raw, unvalidated inputs gathered from defaults, a YAML file and the CLI."""
    # Cache
    cache_size_kb: Optional[int] = None
    block_size_bytes: Optional[int] = None
    associativity: Optional[int] = None
    replacement_policy: str = "RR"  # RR (round robin) or RND (random)

    # Physical memory
    physical_memory_mb: Optional[int] = None
    os_memory_percent: Optional[float] = None

    # Execution
    time_slice: int = TIME_SLICE_ALL  # -1 runs every instruction of a trace
    trace_files: List[str] = field(default_factory=list)

    # Config file
    config_file: str = ""

    # Reporting
    report_dir: str = ""

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        for key, value in yaml_config.items():
            key = _ARG_ALIASES.get(key, key)
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                logger.warning(f"Ignoring unknown config key '{key}' in {yaml_path}")

    def validate(self) -> Configuration:
        """Returns the accepted Configuration or raises a ValidationError."""
        return validate(self)

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if hasattr(args, 'config') and args.config:
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                logger.warning(f"Config file {config.config_file} not found.")

        # 2. Override with command-line arguments
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            key = _ARG_ALIASES.get(key, key)
            if value is not None and hasattr(config, key):
                setattr(config, key, value)

        return config
