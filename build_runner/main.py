#!/usr/bin/env python3
"""
Main entry point for the build runner
Drives git, make, gcovr and the project binaries for a C++ project
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigLoader
from .exceptions import BuildRunnerError
from .options import InvocationOptions
from .platform import PlatformDetector
from .utils import CommandRunner, Logger, working_directory


class BuildRunner:
    """Runs the requested build steps for one project"""

    def __init__(self,
                 root_dir: Optional[Path] = None,
                 config_file: Optional[Path] = None,
                 jobs: Optional[int] = None,
                 verbose: bool = False,
                 dry_run: bool = False,
                 log_file: Optional[str] = None):
        """
        Initialize the build runner

        Args:
            root_dir: Project root directory
            config_file: Optional project settings file
            jobs: Job count for parallel builds (default: cores - 1)
            verbose: Enable verbose output
            dry_run: Log commands instead of running them
            log_file: Optional log file path
        """
        self.logger = Logger(verbose=verbose, log_file=log_file)

        self.config = ConfigLoader(root_dir or Path.cwd(), config_file)
        self.root_dir = self.config.root_dir
        self.project_name = self.config.get_project_name()
        self.test_binary = self.config.get_test_binary()
        self.build_dir = self.config.get_build_dir()
        self.make_command = self.config.get_option("make_command")

        detector = PlatformDetector(logger=self.logger)
        self.cores = detector.cpu_count()
        self.jobs = detector.parallel_jobs(
            requested=jobs,
            configured=self.config.get_option("jobs")
        )

        self.commands = CommandRunner(self.logger, dry_run=dry_run)

        self.logger.debug(f"Project: {self.project_name} ({self.root_dir})")
        self.logger.debug(f"Build directory: {self.build_dir}")
        self.logger.debug(f"Cores: {self.cores}, parallel jobs: {self.jobs}")

    def _binary(self, name: str) -> str:
        """Prefer a binary in the build directory over one on PATH"""
        local = self.build_dir / name
        if local.is_file() and os.access(local, os.X_OK):
            return str(local)
        return name

    def setup(self) -> None:
        """Fetch git submodules"""
        with working_directory(self.root_dir):
            self.commands.run(["git", "submodule", "update", "--init", "--recursive"])

    def clean(self) -> None:
        """Remove build artifacts"""
        with working_directory(self.build_dir):
            self.commands.run([self.make_command, "-j", str(self.jobs), "clean"])

    def build(self, slow: bool = False) -> None:
        """
        Compile the project

        Args:
            slow: Build serially instead of with the parallel job count
        """
        with working_directory(self.build_dir):
            if slow:
                self.commands.run([self.make_command])
            else:
                self.commands.run([self.make_command, "-j", str(self.jobs)])

    def test(self, test_filter: Optional[str] = None) -> None:
        """
        Run the test binary

        Args:
            test_filter: Only run tests matching this filter
        """
        with working_directory(self.build_dir):
            cmd = [self._binary(self.test_binary)]
            if test_filter is not None:
                flag = self.config.get_option("test_filter_flag")
                cmd.append(f"{flag}={test_filter}")
            self.commands.run(cmd)

    def coverage(self) -> None:
        """Write an HTML coverage report into the build directory"""
        with working_directory(self.build_dir):
            self.commands.run([
                "gcovr", "-r", str(self.root_dir),
                "--html", "--html-details",
                "-o", self.config.get_option("coverage_report"),
            ])

    def run_target(self, args: List[str]) -> None:
        """
        Run the project binary

        Args:
            args: Arguments forwarded to the binary in order
        """
        with working_directory(self.build_dir):
            self.commands.run([self._binary(self.project_name), *args])

    def execute(self, options: InvocationOptions) -> None:
        """
        Run every requested step in order, stopping at the first failure

        Args:
            options: Parsed invocation options

        Raises:
            BuildRunnerError: A step failed; later steps were not run
        """
        if options.all:
            # TODO: wire --all to build, test and coverage once the composite
            # behavior (and whether it implies --clean) is agreed on
            self.logger.warning("--all is not implemented yet; "
                                "pass --build --test --coverage instead")
        if options.build_slow and not options.build:
            self.logger.debug("--slow has no effect without --build")

        steps = options.requested_steps()
        for index, step in enumerate(steps, start=1):
            self.logger.info(f"[{index}/{len(steps)}] {step}")
            if step == "setup":
                self.setup()
            elif step == "clean":
                self.clean()
            elif step == "build":
                self.build(slow=options.build_slow)
            elif step == "test":
                self.test(options.test_filter)
            elif step == "coverage":
                self.coverage()
            elif step == "run":
                self.run_target(options.args)

        if steps:
            self.logger.success(f"Finished: {', '.join(steps)}")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid job count: '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"job count must be at least 1, got {number}")
    return number


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="build-runner",
        description="Build, test, measure coverage of and run a make-based C++ project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Steps always run in the order setup, clean, build, test, coverage, run.

Examples:
  %(prog)s --setup                  # Fetch git submodules
  %(prog)s -c -b                    # Clean, then build with cores - 1 jobs
  %(prog)s -b --slow                # Build serially
  %(prog)s -t 'FooTest.*'           # Run only matching tests
  %(prog)s -b -t --coverage         # Build, test and write coverage.html
  %(prog)s -r examples/hello.ss     # Run the project binary with arguments
  %(prog)s -r -- --trace x.ss       # Arguments after -- are passed through as is
  %(prog)s -t -- "-SlowTest.*"      # Negative test filter

Exit status: 0 on success, 1 when a command fails or the settings are
invalid, 2 on a usage error (from argparse), 130 when interrupted.
        """
    )

    parser.add_argument("--setup", action="store_true",
                        help="do all initialization tasks (git submodules)")
    parser.add_argument("-c", "--clean", action="store_true",
                        help="clean build files")
    parser.add_argument("-b", "--build", action="store_true",
                        help="build")
    parser.add_argument("--slow", action="store_true",
                        help="build serially (with --build)")
    parser.add_argument("-t", "--test", action="store_true",
                        help="run tests; a single extra argument filters them")
    parser.add_argument("--coverage", action="store_true",
                        help="generate an HTML code coverage report")
    parser.add_argument("-r", "--run", action="store_true",
                        help="run the project binary with the extra arguments")
    parser.add_argument("-a", "--all", action="store_true",
                        help="build, test, generate code coverage in that order "
                             "(not implemented yet)")

    parser.add_argument("-j", "--jobs", type=_positive_int,
                        help="parallel build jobs (default: cores - 1)")
    parser.add_argument("--root", type=Path,
                        help="project root directory (default: current directory)")
    parser.add_argument("--config", type=Path,
                        help="project settings file (default: <root>/build_runner.yaml)")
    parser.add_argument("--log-file",
                        help="also write a debug log to this file")
    parser.add_argument("--dry-run", action="store_true",
                        help="print commands without running them")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable verbose output")

    parser.add_argument("args", nargs="*",
                        help="test filter (with --test) or program arguments (with --run)")

    return parser


def parse_options(parser: argparse.ArgumentParser,
                  argv: Optional[List[str]] = None) -> InvocationOptions:
    """
    Parse the command line into invocation options

    Everything after the first "--" is kept verbatim as positional
    arguments, even when it starts with a dash.
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    extra_args: List[str] = []
    if "--" in argv:
        split = argv.index("--")
        argv, extra_args = argv[:split], argv[split + 1:]
    return InvocationOptions.from_namespace(parser.parse_intermixed_args(argv), extra_args)


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface"""
    parser = build_arg_parser()
    options = parse_options(parser, argv)

    if not options.requested_steps() and not options.all:
        parser.print_help()
        return 0

    try:
        runner = BuildRunner(
            root_dir=options.root,
            config_file=options.config_file,
            jobs=options.jobs,
            verbose=options.verbose,
            dry_run=options.dry_run,
            log_file=options.log_file
        )
    except BuildRunnerError as e:
        print(f"Error initializing build runner: {e}", file=sys.stderr)
        return 1

    try:
        runner.execute(options)
    except KeyboardInterrupt:
        print("\nBuild interrupted by user", file=sys.stderr)
        return 130
    except BuildRunnerError as e:
        runner.logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
