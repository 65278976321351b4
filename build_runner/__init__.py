"""
Build Runner
Drives git, make, gcovr and the project binaries for a make-based C++ project
"""

__version__ = "1.0.0"

from .main import BuildRunner, main

__all__ = ["BuildRunner", "main", "__version__"]
