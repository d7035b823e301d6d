"""Source loader configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass, field


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


DEFAULT_BASE_PATH = _env_str("SOURCEVFS_BASE_PATH", "")
DEFAULT_INCLUDE_PATHS = _env_list("SOURCEVFS_INCLUDE_PATHS", [])
DEFAULT_ALLOW_PATHS = _env_list("SOURCEVFS_ALLOW_PATHS", [])

STDIN_ARGUMENT = "-"
LOG_FORMATS = ["json", "text"]


@dataclass
class VfsConfig:
    """Search paths, sandbox and inputs for one compilation run."""

    base_path: str = ""
    include_paths: list[str] = field(default_factory=list)
    allowed_directories: list[str] = field(default_factory=list)
    input_files: list[str] = field(default_factory=list)
    read_stdin: bool = False
    resolve_names: list[str] = field(default_factory=list)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "VfsConfig":
        """Build the configuration from parsed CLI arguments."""
        inputs = list(args.inputs)
        return cls(
            base_path=args.base_path,
            include_paths=list(args.include_paths),
            allowed_directories=_split_list(args.allow_paths),
            input_files=[item for item in inputs if item != STDIN_ARGUMENT],
            read_stdin=STDIN_ARGUMENT in inputs,
            resolve_names=list(args.resolve),
        )


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for source loader configuration."""
    parser = argparse.ArgumentParser(description="Sandboxed compiler source loader")
    parser.add_argument(
        "inputs",
        nargs="*",
        help="Source files to load; '-' reads standard input",
    )
    parser.add_argument(
        "--base-path",
        default=DEFAULT_BASE_PATH,
        help="Primary search root for imports and source unit names",
    )
    parser.add_argument(
        "--include-path",
        dest="include_paths",
        action="append",
        default=list(DEFAULT_INCLUDE_PATHS),
        help="Additional search root, consulted in order after the base path",
    )
    parser.add_argument(
        "--allow-paths",
        default=",".join(DEFAULT_ALLOW_PATHS),
        help="Comma-separated list of directories imports may be read from",
    )
    parser.add_argument(
        "--resolve",
        action="append",
        default=[],
        help="Source unit name to read through the import callback",
    )
    default_log_level = os.getenv("SOURCEVFS_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("SOURCEVFS_LOG_DESTINATION", "stderr")
    default_log_format = os.getenv("SOURCEVFS_LOG_FORMAT", "json").lower()
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stderr (default), stdout or a file path",
    )
    parser.add_argument(
        "--log-format",
        default=default_log_format,
        choices=LOG_FORMATS,
        type=str.lower,
    )
    return parser.parse_args(argv)
