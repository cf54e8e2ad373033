"""
Job file parsing for Dep-Grouper.

A job file holds the raw 'dependency-groups' configuration of an update job
together with the dependencies detected for it.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

import toml
import yaml

from .cli_config import get_config
from .dependency import DEPENDENCY_TYPES, PRODUCTION, Dependency
from .error_handling import JobFileError, log_parsing_error


@dataclass
class JobDefinition:
    """Raw group definitions and detected dependencies of one update job."""

    dependency_groups: List[Dict[str, Any]] = field(default_factory=list)
    dependencies: List[Dependency] = field(default_factory=list)
    source_file: str = ""


def _validate_file_path(file_path: str) -> Path:
    """
    Validate a job file path before reading it.

    Args:
        file_path: The file path to validate

    Returns:
        Path: Validated and resolved path object

    Raises:
        JobFileError: If path is invalid or unsafe
    """
    if not file_path or not isinstance(file_path, str):
        raise JobFileError("File path must be a non-empty string")

    try:
        path = Path(file_path).resolve()
    except (OSError, ValueError) as e:
        raise JobFileError(f"Invalid file path: {e}")

    if not path.exists():
        raise JobFileError(f"File does not exist: {path}")

    if not path.is_file():
        raise JobFileError(f"Path is not a file: {path}")

    config = get_config()
    allowed_extensions = set(config.job.allowed_file_extensions)
    if path.suffix.lower() not in allowed_extensions:
        raise JobFileError(f"File type not allowed: {path.suffix}")

    try:
        file_size = path.stat().st_size
    except OSError as e:
        raise JobFileError(f"Cannot access file: {e}")

    max_file_size = config.job.max_file_size_bytes
    if file_size > max_file_size:
        raise JobFileError(f"File too large: {file_size} bytes (max: {max_file_size})")

    return path


def _load_raw_job(path: Path) -> Any:
    suffix = path.suffix.lower()
    try:
        with open(path, encoding="utf-8") as f:
            if suffix in (".yaml", ".yml"):
                return yaml.safe_load(f)
            if suffix == ".toml":
                return toml.load(f)
            return json.load(f)
    except PermissionError:
        raise JobFileError("Permission denied reading file")
    except UnicodeDecodeError:
        raise JobFileError("File contains invalid UTF-8 characters")
    except (ValueError, yaml.YAMLError, toml.TomlDecodeError) as e:
        raise JobFileError(f"Invalid {suffix.lstrip('.')} content: {e}")
    except OSError as e:
        raise JobFileError(f"Error reading file: {e}")


def parse_group_definitions(raw_groups: Any) -> List[Dict[str, Any]]:
    """
    Check the shape of raw group definitions.

    Rule contents are left to the rules themselves; only the name and the
    presence of a rules mapping are checked here.
    """
    if raw_groups is None:
        return []
    if not isinstance(raw_groups, list):
        raise JobFileError("'dependency-groups' must be a list")

    groups = []
    for index, group in enumerate(raw_groups):
        if not isinstance(group, Mapping):
            raise JobFileError(f"dependency group #{index + 1} must be a mapping")
        name = group.get("name")
        if not isinstance(name, str) or not name:
            raise JobFileError(f"dependency group #{index + 1} has no name")
        rules = group.get("rules") or {}
        if not isinstance(rules, Mapping):
            raise JobFileError(f"rules of dependency group '{name}' must be a mapping")
        groups.append({"name": name, "rules": dict(rules)})
    return groups


def parse_dependencies(raw_dependencies: Any, source_file: str = "") -> List[Dependency]:
    """Convert raw dependency entries to Dependency objects, keeping order."""
    if raw_dependencies is None:
        return []
    if not isinstance(raw_dependencies, list):
        raise JobFileError("'dependencies' must be a list")

    dependencies = []
    for index, entry in enumerate(raw_dependencies):
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, Mapping) or not entry.get("name"):
            raise JobFileError(f"dependency #{index + 1} has no name")

        dependency_type = entry.get("type", entry.get("dependency-type", PRODUCTION))
        if dependency_type not in DEPENDENCY_TYPES:
            raise JobFileError(
                f"dependency '{entry['name']}' has unknown type: {dependency_type}"
            )

        dependencies.append(
            Dependency(
                name=str(entry["name"]),
                version=str(entry.get("version") or ""),
                source_file=str(entry.get("source", source_file)),
                dependency_type=dependency_type,
                package_manager=entry.get("package-manager"),
            )
        )
    return dependencies


def parse_job_data(data: Any, source_file: str = "") -> JobDefinition:
    if data is None:
        return JobDefinition(source_file=source_file)
    if not isinstance(data, Mapping):
        raise JobFileError("Job file must contain a mapping at the top level")

    return JobDefinition(
        dependency_groups=parse_group_definitions(data.get("dependency-groups")),
        dependencies=parse_dependencies(data.get("dependencies"), source_file),
        source_file=source_file,
    )


def parse_job_file(file_path: str) -> JobDefinition:
    """
    Parse a JSON, YAML or TOML job file.

    Args:
        file_path: Path to the job file

    Returns:
        JobDefinition: Group definitions and dependencies of the job

    Raises:
        JobFileError: If the file cannot be read or has an invalid shape
    """
    try:
        path = _validate_file_path(file_path)
        return parse_job_data(_load_raw_job(path), source_file=path.name)
    except JobFileError as e:
        log_parsing_error(str(e), "parsers", "parse_job_file", file_path=file_path)
        raise
