#!/usr/bin/env python3
"""
Main entry point for the OpenVDB CI build matrix driver
"""

import argparse
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

from .config import ConfigLoader, DriverSettings
from .errors import ConfigError, DriverError, ExternalCommandFailed, InvalidVariant
from .steps import StepContext, StepOrchestrator
from .utils import CommandRunner, FileOperations, Logger, RecordingRunner
from .variables import build_variables, render_arguments, select_variable_sets
from .variant import FIELD_ORDER, BuildVariant


class BuildMatrixDriver:
    """Runs one cell of the build matrix"""

    def __init__(self,
                 variant: BuildVariant,
                 config_dir: Optional[Path] = None,
                 jobs: Optional[int] = None,
                 verbose: bool = False,
                 dry_run: bool = False,
                 log_file: Optional[str] = None,
                 logger: Optional[Any] = None,
                 runner: Optional[CommandRunner] = None,
                 files: Optional[FileOperations] = None):
        """
        Initialize the driver

        Args:
            variant: Validated build variant
            config_dir: Directory holding the YAML configuration
            jobs: Override for make parallelism
            verbose: Enable verbose output
            dry_run: Record commands without running them
            log_file: Optional log file path
            logger: Logger to use instead of creating one
            runner: Command runner to use instead of creating one
            files: File operations to use instead of creating them
        """
        self.variant = variant
        self.dry_run = dry_run
        self.logger = logger or Logger(verbose=verbose, log_file=log_file)

        self.config = ConfigLoader(config_dir)
        self.settings: DriverSettings = self.config.build_settings(jobs=jobs)

        if runner is None:
            runner = RecordingRunner(self.logger) if dry_run else CommandRunner(self.logger)
        self.runner = runner
        self.files = files or FileOperations(self.logger, dry_run=dry_run)

        self.context = StepContext(
            variant=variant,
            settings=self.settings,
            config=self.config,
            runner=self.runner,
            files=self.files,
            logger=self.logger,
        )
        self.orchestrator = StepOrchestrator(self.context)

    def show_variables(self) -> None:
        """Log the make variables selected for this variant"""
        platform, compression = select_variable_sets(self.variant)
        self.logger.debug(f"Variable sets: common + {platform} + {compression}")
        self.logger.debug(f"make arguments: "
                          f"{render_arguments(build_variables(self.variant, self.config, self.settings))}")

    def run(self) -> None:
        """
        Run every step for the variant

        Raises:
            DriverError: the first failing command or configuration problem
        """
        self.logger.info(f"OpenVDB CI: {self.variant.label()}")
        self.show_variables()

        self.orchestrator.run()

        if self.dry_run and isinstance(self.runner, RecordingRunner):
            self.logger.raw("\nCommands:")
            for command in self.runner.commands:
                self.logger.raw(f"  {command}")

        self.logger.success(f"{self.variant.task} finished for {self.variant.label()}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vdb-ci",
        description="OpenVDB CI driver - install dependencies or build and test one matrix variant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s install 5 yes release none gcc     # Install standalone dependencies with Blosc
  %(prog)s script 5 yes release none gcc      # Build, install and test OpenVDB
  %(prog)s script 4 no header none clang      # Header hygiene check only
  %(prog)s install 5 yes release 16.5 gcc     # Fetch the Houdini 16.5 SDK
  %(prog)s script 5 yes release 16.5 gcc      # Build the Houdini plugin
        """
    )

    parser.add_argument("task", help="install or script")
    parser.add_argument("abi", help="OpenVDB ABI version")
    parser.add_argument("blosc", help="yes or no")
    parser.add_argument("mode", help="release, debug or header")
    parser.add_argument("houdini_major", help="Houdini major version, or none")
    parser.add_argument("compiler", help="gcc or clang")

    parser.add_argument(
        "--config-dir",
        type=Path,
        help="Directory containing settings.yaml, dependencies.yaml and variables.yaml"
    )

    parser.add_argument(
        "--jobs", "-j",
        type=int,
        help="Parallel make jobs (default: from settings.yaml)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the commands without running them"
    )

    parser.add_argument(
        "--log-file",
        help="Also write the full log to this file"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None):
    """Command-line interface"""
    parser = build_parser()
    args = parser.parse_args(argv)

    positional: List[str] = [getattr(args, name) for name in FIELD_ORDER]
    try:
        variant = BuildVariant.from_args(positional)
    except InvalidVariant as e:
        parser.error(str(e))

    logger = Logger(verbose=args.verbose, log_file=args.log_file)

    try:
        driver = BuildMatrixDriver(
            variant,
            config_dir=args.config_dir,
            jobs=args.jobs,
            dry_run=args.dry_run,
            logger=logger,
        )
        driver.run()
    except KeyboardInterrupt:
        print("\nBuild interrupted by user", file=sys.stderr)
        sys.exit(130)
    except ExternalCommandFailed as e:
        logger.error(str(e))
        sys.exit(e.returncode if 0 < e.returncode < 256 else 1)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"File operation failed: {e}")
        sys.exit(1)
    except DriverError as e:
        logger.error(f"Driver error: {e}")
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
