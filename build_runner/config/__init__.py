"""
Configuration management for the build runner
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import ConfigurationError

DEFAULT_CONFIG_NAME = "build_runner.yaml"


class ProjectSettings(BaseModel):
    """Holds per-project overrides read from the settings file"""
    model_config = ConfigDict(extra="forbid")

    project_name: Optional[str] = None
    """Name of the run binary, defaults to the project root's basename"""
    test_binary: Optional[str] = None
    """Name of the test binary, defaults to <project_name>Test"""
    build_dir: str = "build"
    """Build directory, relative to the project root unless absolute"""
    make_command: str = "make"
    """Build tool invoked for clean and build"""
    test_filter_flag: str = "--gtest_filter"
    """Option the test binary takes its filter through"""
    coverage_report: str = "coverage.html"
    """HTML report written by gcovr into the build directory"""
    jobs: Optional[int] = Field(default=None, ge=1)
    """Fixed job count for parallel builds"""


class ConfigLoader:
    """Loads project settings and derives the project layout"""

    def __init__(self, root_dir: Path, config_file: Optional[Path] = None):
        """
        Initialize configuration loader

        Args:
            root_dir: Project root directory
            config_file: Settings file. When omitted, build_runner.yaml in
                the project root is used if it exists.
        """
        self.root_dir = Path(root_dir).resolve()

        if config_file is None:
            config_file = self.root_dir / DEFAULT_CONFIG_NAME
            if not config_file.exists():
                config_file = None
        elif not Path(config_file).exists():
            raise ConfigurationError(f"Settings file not found: {config_file}")

        self.config_file = Path(config_file) if config_file else None
        self.settings = self._load(self.config_file)

    @staticmethod
    def _load(config_file: Optional[Path]) -> ProjectSettings:
        if config_file is None:
            return ProjectSettings()

        try:
            with open(config_file, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read {config_file}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{config_file} must contain a mapping")

        try:
            return ProjectSettings(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in {config_file}:\n{e}") from e

    def get_project_name(self) -> str:
        """Name of the project and of its run binary"""
        return self.settings.project_name or self.root_dir.name

    def get_test_binary(self) -> str:
        """Name of the project's test binary"""
        return self.settings.test_binary or f"{self.get_project_name()}Test"

    def get_build_dir(self) -> Path:
        """Absolute path of the build directory"""
        return self.root_dir / self.settings.build_dir

    def get_option(self, key: str, default: Any = None) -> Any:
        """
        Get a setting by name

        Args:
            key: Setting name
            default: Value returned when the setting is unset

        Returns:
            Setting value
        """
        value = getattr(self.settings, key, None)
        return default if value is None else value


__all__ = ["ConfigLoader", "ProjectSettings", "DEFAULT_CONFIG_NAME"]
