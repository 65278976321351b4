"""Allows running the build runner with python -m build_runner"""
import sys

from build_runner.main import main

if __name__ == "__main__":
    sys.exit(main())
