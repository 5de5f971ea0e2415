"""Configuration service for loading launcher settings."""

import json
from dataclasses import replace
from pathlib import Path
from typing import Any

import structlog

from ..models import LauncherConfig, RepositorySource
from ..models.release import Build, Profile
from .errors import ConfigurationError

log = structlog.stdlib.get_logger()

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for reading launcher configuration.

    The file is only ever read; settings are owned by the surrounding
    application.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or Path.home() / ".config" / "game-launcher" / "config.json"
        log.info("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> LauncherConfig:
        """Load configuration from file or return default configuration."""
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return LauncherConfig()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = self._dict_to_config(data)
        except (OSError, json.JSONDecodeError, ConfigurationError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return LauncherConfig()

        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
            return LauncherConfig()

        log.info("Configuration loaded successfully", repositories=len(config.repositories))
        return config

    def validate_config(self, config: LauncherConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        if not config.repositories:
            errors.append("repositories cannot be empty")
        for source in config.repositories:
            if not source.base_url.startswith(("http://", "https://")):
                errors.append(f"repository base_url must be an http(s) URL: {source.base_url}")
            if not source.job.strip():
                errors.append("repository job cannot be empty")

        if not isinstance(config.build_limit, int) or config.build_limit < 1:
            errors.append("build_limit must be a positive integer")
        elif config.build_limit > 100:
            errors.append("build_limit should not exceed 100")

        for name in ("launcher_release_url", "download_page_url"):
            if not getattr(config, name).startswith(("http://", "https://")):
                errors.append(f"{name} must be an http(s) URL")

        if not isinstance(config.launcher_directory, Path) or not config.launcher_directory.is_absolute():
            errors.append("launcher_directory must be an absolute path")

        if not isinstance(config.request_timeout, (int, float)) or config.request_timeout <= 0:
            errors.append("request_timeout must be a positive number")
        elif config.request_timeout > 300:
            errors.append("request_timeout should not exceed 300 seconds")

        if not isinstance(config.max_retries, int) or config.max_retries < 0:
            errors.append("max_retries must be a non-negative integer")
        elif config.max_retries > 5:
            errors.append("max_retries should not exceed 5")

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        return ValidationResult(len(errors) == 0, errors)

    def _dict_to_config(self, data: Any) -> LauncherConfig:
        """Convert a decoded JSON document to LauncherConfig; missing keys keep their defaults.

        Raises:
            ConfigurationError: If a value has the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a JSON object", current_value=type(data).__name__)

        values: dict[str, Any] = {}

        if "repositories" in data:
            if not isinstance(data["repositories"], list):
                raise ConfigurationError("repositories must be a list", setting="repositories")
            values["repositories"] = [self._parse_source(entry) for entry in data["repositories"]]

        for key, kind in (
            ("build_limit", int),
            ("launcher_release_url", str),
            ("download_page_url", str),
            ("search_for_launcher_updates", bool),
            ("install_updates_in_place", bool),
            ("keep_downloaded_files", bool),
            ("request_timeout", (int, float)),
            ("max_retries", int),
            ("log_level", str),
        ):
            if key not in data:
                continue
            value = data[key]
            # bool is an int subclass
            if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
                raise ConfigurationError(f"Invalid value for {key}", setting=key, current_value=value)
            values[key] = value

        if "launcher_directory" in data:
            values["launcher_directory"] = Path(str(data["launcher_directory"])).expanduser()

        if "log_level" in values:
            values["log_level"] = values["log_level"].upper()

        return replace(LauncherConfig(), **values)

    @staticmethod
    def _parse_source(entry: Any) -> RepositorySource:
        try:
            return RepositorySource(
                base_url=str(entry["base_url"]),
                job=str(entry["job"]),
                build=Build.parse(str(entry.get("build", "stable"))),
                profile=Profile.parse(str(entry.get("profile", "omega"))),
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise ConfigurationError(
                "Invalid repository entry",
                setting="repositories",
                current_value=entry,
                expected='{"base_url": ..., "job": ..., "build": "stable|nightly", "profile": "omega|engine"}',
            ) from e
