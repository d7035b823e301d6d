"""Command-line driver loading compiler sources through the sandboxed reader."""

import sys
from pathlib import Path
from typing import TextIO

from sourcevfs.bootstrap.config import VfsConfig, parse_cli_args
from sourcevfs.bootstrap.logging_setup import configure_logging
from sourcevfs.domain.errors import VfsInvariantError
from sourcevfs.domain.run_id import compilation_run, component_logger
from sourcevfs.domain.vfs_types import ReadCallbackKind
from sourcevfs.handlers.file_reader import FileReadService
from sourcevfs.lifecycle.source_registry import SourceRegistry
from sourcevfs.security.sandbox import SandboxRegistry

DRIVER_LOGGER = component_logger("sourcevfs.driver")


def build_reader(config: VfsConfig) -> FileReadService:
    """Configure the sandbox for ``config`` and return a reader over it.

    The directory of every input file is allowed so that files next to an
    input can be imported without further configuration.
    """
    allowed = list(config.allowed_directories)
    allowed.extend(str(Path(item).parent) for item in config.input_files)
    sandbox = SandboxRegistry(config.base_path, config.include_paths, allowed)
    return FileReadService(sandbox, SourceRegistry())


def load_inputs(reader: FileReadService, config: VfsConfig, stdin: TextIO) -> None:
    """Register the input files, and standard input when requested."""
    for input_file in config.input_files:
        with open(input_file, encoding="utf-8", newline="") as file_handle:
            reader.set_source(input_file, file_handle.read())
    if config.read_stdin:
        reader.set_stdin(stdin.read())


def run(config: VfsConfig, stdin: TextIO, stdout: TextIO) -> int:
    """Load inputs, resolve requested imports and report the outcome."""
    reader = build_reader(config)
    load_inputs(reader, config, stdin)

    exit_code = 0
    for name in config.resolve_names:
        result = reader.read_file(ReadCallbackKind.READ_FILE.value, name)
        if result.success:
            stdout.write(f"ok {name}\n")
        else:
            stdout.write(f"error {name}: {result.content}\n")
            exit_code = 1

    for source_unit_name in reader.sources:
        stdout.write(f"source {source_unit_name}\n")
    return exit_code


def main() -> None:
    """Run the source loader for the command-line arguments."""
    args = parse_cli_args(sys.argv[1:])
    with compilation_run():
        configure_logging(
            args.log_level, args.log_destination, use_json=args.log_format == "json"
        )
        config = VfsConfig.from_args(args)
        DRIVER_LOGGER.info(
            "Starting source loader",
            extra={
                "base_path": config.base_path,
                "include_paths": config.include_paths,
                "allowed_directories": config.allowed_directories,
                "inputs": config.input_files,
            },
        )
        try:
            exit_code = run(config, sys.stdin, sys.stdout)
        except VfsInvariantError as error:
            DRIVER_LOGGER.critical(
                "Invalid source loader configuration",
                extra={"error_type": type(error).__name__},
            )
            raise
        except OSError as error:
            DRIVER_LOGGER.error(
                "Failed to load input file",
                extra={"error_type": type(error).__name__, "path": error.filename},
            )
            exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
