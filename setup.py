"""
setup.py for the build runner

Runtime Requirements:
- git (for --setup)
- make (for --clean and --build)
- gcovr (for --coverage)
- The project's compiled run and test binaries (for --run and --test)

Parallel Build Support:
- make is invoked with one job less than the CPU count
- Override with: build-runner --jobs N
- Or set environment: export BUILD_RUNNER_MAX_JOBS=N

Project Settings:
- Optional build_runner.yaml in the project root (or --config PATH)
- Keys: project_name, test_binary, build_dir, make_command,
  test_filter_flag, coverage_report, jobs
"""

from pathlib import Path
from setuptools import setup, find_packages

readme = Path(__file__).parent / "README.md"
long_description = readme.read_text(encoding="utf-8") if readme.exists() else ""

setup(
    name="build-runner",
    version="1.0.0",
    description="Build, test, coverage and run driver for make-based C++ projects",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["build_runner", "build_runner.*"]),
    entry_points={
        "console_scripts": [
            "build-runner=build_runner.main:main",
        ],
    },
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2",
        "PyYAML",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ]
    },
)
