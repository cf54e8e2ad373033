"""
Configuration management for Dep-Grouper.

Provides configurable output and logging settings, loaded from a config
file and environment variable overrides.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console

console = Console(stderr=True)

OUTPUT_FORMATS = ("console", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class OutputConfig:
    """Report output configuration."""

    output_format: str = "console"
    output_file: Optional[str] = None
    show_empty_groups: bool = True
    quiet: bool = False


@dataclass
class LoggingConfig:
    """Logging and error handling configuration."""

    log_level: str = "WARNING"
    enable_json_logging: bool = False


@dataclass
class JobConfig:
    """Limits applied when reading job files."""

    max_file_size_mb: int = 10
    allowed_file_extensions: List[str] = field(
        default_factory=lambda: [".json", ".yaml", ".yml", ".toml"]
    )

    @property
    def max_file_size_bytes(self) -> int:
        """Convert MB to bytes for internal use."""
        return self.max_file_size_mb * 1024 * 1024


@dataclass
class ComprehensiveConfig:
    """Main configuration containing all subsections."""

    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    job: JobConfig = field(default_factory=JobConfig)


# Global configuration instance
_global_config: Optional[ComprehensiveConfig] = None


def validate_config_values(config: ComprehensiveConfig) -> List[str]:
    """
    Validate configuration values and return any errors.

    Args:
        config: Configuration to validate

    Returns:
        List[str]: List of validation errors (empty if valid)
    """
    errors = []

    if config.output.output_format not in OUTPUT_FORMATS:
        errors.append(f"output.output_format must be one of {', '.join(OUTPUT_FORMATS)}")

    if str(config.logging.log_level).upper() not in LOG_LEVELS:
        errors.append(f"logging.log_level must be one of {', '.join(LOG_LEVELS)}")

    if config.job.max_file_size_mb <= 0:
        errors.append("job.max_file_size_mb must be positive")

    return errors


def load_config_file(config_path: Path) -> Optional[Dict[str, Any]]:
    """Load config from file."""
    if not config_path.exists():
        return None

    try:
        with open(config_path, encoding="utf-8") as f:
            if config_path.suffix.lower() in [".yaml", ".yml"]:
                return yaml.safe_load(f)
            elif config_path.suffix.lower() == ".json":
                return json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(
            f"⚠️  Error loading config from {config_path}: {e}", style="yellow"
        )

    return None


def find_config_file() -> Optional[Path]:
    """Find config file in standard locations."""
    locations = [
        Path.cwd() / ".dep-grouper.json",
        Path.cwd() / ".dep-grouper.yaml",
        Path.cwd() / ".dep-grouper.yml",
        Path.home() / ".config" / "dep-grouper" / "config.json",
        Path.home() / ".config" / "dep-grouper" / "config.yaml",
    ]

    for location in locations:
        if location.exists():
            return location

    return None


def load_environment_overrides(config: ComprehensiveConfig) -> None:
    """Load environment variable overrides."""

    def get_env_bool(key: str, default: bool = False) -> bool:
        value = os.environ.get(key, "").lower()
        return value in ["true", "1", "yes", "on"] if value else default

    if log_level := os.environ.get("DEP_GROUPER_LOG_LEVEL"):
        config.logging.log_level = log_level.upper()
    config.logging.enable_json_logging = get_env_bool(
        "DEP_GROUPER_JSON_LOGGING", config.logging.enable_json_logging
    )

    if output_format := os.environ.get("DEP_GROUPER_OUTPUT_FORMAT"):
        config.output.output_format = output_format.lower()
    if output_file := os.environ.get("DEP_GROUPER_OUTPUT_FILE"):
        config.output.output_file = output_file
    config.output.show_empty_groups = get_env_bool(
        "DEP_GROUPER_SHOW_EMPTY_GROUPS", config.output.show_empty_groups
    )


def apply_config_section(
    config: Any, section_data: Dict[str, Any], section_name: str
) -> None:
    """Apply configuration from dictionary to config section."""
    for key, value in section_data.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            console.print(
                f"⚠️  Unknown config key in {section_name}: {key}", style="yellow"
            )


def apply_config_data(config: ComprehensiveConfig, file_config: Dict[str, Any]) -> None:
    for section_name in ("output", "logging", "job"):
        if section_name in file_config:
            apply_config_section(
                getattr(config, section_name), file_config[section_name], section_name
            )


def load_config() -> ComprehensiveConfig:
    """Load configuration from file and environment."""
    global _global_config

    if _global_config is not None:
        return _global_config

    config = ComprehensiveConfig()

    config_file = find_config_file()
    if config_file:
        file_config = load_config_file(config_file)
        if file_config:
            apply_config_data(config, file_config)

    load_environment_overrides(config)

    validation_errors = validate_config_values(config)
    if validation_errors:
        console.print("⚠️  Configuration validation errors:", style="red")
        for error in validation_errors:
            console.print(f"  • {error}", style="red")
        console.print("Using default values for invalid settings.", style="yellow")
        _reset_invalid_values(config)

    _global_config = config
    return config


def _reset_invalid_values(config: ComprehensiveConfig) -> None:
    defaults = ComprehensiveConfig()
    if config.output.output_format not in OUTPUT_FORMATS:
        config.output.output_format = defaults.output.output_format
    if str(config.logging.log_level).upper() not in LOG_LEVELS:
        config.logging.log_level = defaults.logging.log_level
    if config.job.max_file_size_mb <= 0:
        config.job.max_file_size_mb = defaults.job.max_file_size_mb


def get_config() -> ComprehensiveConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _global_config
    _global_config = None


def create_sample_config() -> str:
    """Generate a sample configuration."""
    sample_config = {
        "output": {
            "output_format": "console",
            "output_file": None,
            "show_empty_groups": True,
            "quiet": False,
        },
        "logging": {
            "log_level": "WARNING",
            "enable_json_logging": False,
        },
        "job": {
            "max_file_size_mb": 10,
            "allowed_file_extensions": [".json", ".yaml", ".yml", ".toml"],
        },
    }

    return json.dumps(sample_config, indent=2)
