"""Options parsed from the command line for a single invocation"""

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

STEP_ORDER = ("setup", "clean", "build", "test", "coverage", "run")
"""Steps in the order they execute, whatever order the flags came in"""


@dataclass(frozen=True)
class InvocationOptions:
    """Flags and arguments for one build runner invocation"""

    setup: bool = False
    clean: bool = False
    build: bool = False
    build_slow: bool = False
    test: bool = False
    coverage: bool = False
    run: bool = False
    all: bool = False
    args: List[str] = field(default_factory=list)

    verbose: bool = False
    dry_run: bool = False
    jobs: Optional[int] = None
    root: Optional[Path] = None
    config_file: Optional[Path] = None
    log_file: Optional[str] = None

    @classmethod
    def from_namespace(cls, ns: argparse.Namespace,
                       extra_args: Optional[List[str]] = None) -> "InvocationOptions":
        """
        Build options from parsed arguments

        extra_args, the words that followed "--", are appended to the
        positional arguments unchanged.
        """
        return cls(
            setup=ns.setup,
            clean=ns.clean,
            build=ns.build,
            build_slow=ns.slow,
            test=ns.test,
            coverage=ns.coverage,
            run=ns.run,
            all=ns.all,
            args=[*ns.args, *(extra_args or [])],
            verbose=ns.verbose,
            dry_run=ns.dry_run,
            jobs=ns.jobs,
            root=ns.root,
            config_file=ns.config,
            log_file=ns.log_file,
        )

    @property
    def test_filter(self) -> Optional[str]:
        """The test filter, given as the only positional argument"""
        if len(self.args) == 1:
            return self.args[0]
        return None

    def requested_steps(self) -> List[str]:
        return [step for step in STEP_ORDER if getattr(self, step)]
