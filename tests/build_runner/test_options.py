import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from build_runner.main import build_arg_parser, parse_options
from build_runner.options import STEP_ORDER, InvocationOptions


def _parse(*argv) -> InvocationOptions:
    return InvocationOptions.from_namespace(build_arg_parser().parse_intermixed_args(list(argv)))


def test_short_and_long_flags_map_to_steps():
    options = _parse("-c", "-b", "-t", "-r", "-a", "--setup", "--coverage", "--slow")

    assert options.setup and options.clean and options.build and options.test
    assert options.coverage and options.run and options.all and options.build_slow


def test_requested_steps_follow_fixed_order():
    options = _parse("--run", "--coverage", "--test", "--build", "--clean", "--setup")

    assert options.requested_steps() == list(STEP_ORDER)


def test_requested_steps_skip_unset_flags():
    assert _parse("--test", "--setup").requested_steps() == ["setup", "test"]
    assert _parse().requested_steps() == []


def test_slow_and_all_are_not_steps():
    assert _parse("--slow", "--all").requested_steps() == []


def test_positional_arguments_may_be_intermixed_with_flags():
    options = _parse("a", "--run", "b", "-v", "c")

    assert options.args == ["a", "b", "c"]
    assert options.verbose


def test_test_filter_requires_exactly_one_argument():
    assert _parse("-t", "FooTest.*").test_filter == "FooTest.*"
    assert _parse("-t").test_filter is None
    assert _parse("-t", "a", "b").test_filter is None


def test_ambient_options():
    options = _parse("-b", "--jobs", "4", "--dry-run", "--root", "proj",
                     "--config", "proj/alt.yaml", "--log-file", "build.log")

    assert options.jobs == 4
    assert options.dry_run
    assert options.root == Path("proj")
    assert options.config_file == Path("proj/alt.yaml")
    assert options.log_file == "build.log"


@pytest.mark.parametrize("value", ["0", "-2", "many"])
def test_jobs_must_be_a_positive_integer(value):
    with pytest.raises(SystemExit):
        _parse("-b", "--jobs", value)


def test_words_after_double_dash_are_positional():
    options = parse_options(build_arg_parser(), ["-r", "a", "--", "--verbose", "-x"])

    assert options.run
    assert not options.verbose
    assert options.args == ["a", "--verbose", "-x"]


def test_only_first_double_dash_separates():
    options = parse_options(build_arg_parser(), ["-r", "--", "x", "--", "y"])

    assert options.args == ["x", "--", "y"]
