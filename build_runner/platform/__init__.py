"""
Platform detection and build parallelism
"""

import os
from typing import Any, Optional

MAX_JOBS_ENV = "BUILD_RUNNER_MAX_JOBS"


class PlatformDetector:
    """Provides information about the machine the build runs on"""

    def __init__(self, logger: Optional[Any] = None):
        self.logger = logger

    def cpu_count(self) -> int:
        """Number of CPU cores, 1 when it cannot be determined"""
        return os.cpu_count() or 1

    def _env_jobs(self) -> Optional[int]:
        """Read the job count override from the environment"""
        env_value = os.environ.get(MAX_JOBS_ENV)
        if not env_value:
            return None
        try:
            jobs = int(env_value)
        except ValueError:
            jobs = 0
        if jobs < 1:
            if self.logger:
                self.logger.warning(
                    f"Ignoring invalid {MAX_JOBS_ENV} value '{env_value}'"
                )
            return None
        return jobs

    def parallel_jobs(self,
                      requested: Optional[int] = None,
                      configured: Optional[int] = None) -> int:
        """
        Work out the job count passed to make -j

        Args:
            requested: Explicit count from the command line
            configured: Count from the project settings file

        Returns:
            The first of requested, the environment override, configured,
            or one less than the core count. Never below 1.
        """
        for jobs in (requested, self._env_jobs(), configured):
            if jobs is not None:
                return max(jobs, 1)
        return max(self.cpu_count() - 1, 1)


__all__ = ["PlatformDetector", "MAX_JOBS_ENV"]
