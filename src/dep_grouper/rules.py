"""
Matching rules for dependency groups.

A group only asks its rules two questions: does a dependency match, and may
the group move its members to the highest version available. Rule syntax is
owned here so it can evolve without touching the grouping engine.
"""

import fnmatch
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .dependency import DEPENDENCY_TYPES, DEVELOPMENT, PRODUCTION, Dependency
from .error_handling import RulesConfigurationError

UPDATE_TYPES = ("major", "minor", "patch")


class MatchingRules(ABC):
    """Base class for anything a group can use to select dependencies."""

    @abstractmethod
    def matches(self, dependency: Dependency) -> bool:
        """Check whether the dependency belongs to the group."""
        pass

    @abstractmethod
    def permits_highest_version(self) -> bool:
        """Check whether members may be updated to the newest version."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        return {}


def wildcard_match(pattern: str, name: str) -> bool:
    """Case-insensitive match where '*' stands for any run of characters."""
    return fnmatch.fnmatchcase(name.lower(), pattern.lower())


def _string_list(rules: Mapping[str, Any], key: str) -> Optional[Tuple[str, ...]]:
    if key not in rules:
        return None

    value = rules[key]
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(item, str) for item in value
    ):
        raise RulesConfigurationError(f"'{key}' must be a list of strings")
    return tuple(value)


@dataclass(frozen=True)
class GroupRules(MatchingRules):
    """Rules from the 'groups' section of an update configuration file."""

    patterns: Optional[Tuple[str, ...]] = None
    exclude_patterns: Tuple[str, ...] = ()
    dependency_type: Optional[str] = None
    update_types: Optional[Tuple[str, ...]] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_config(cls, rules: Optional[Mapping[str, Any]]) -> "GroupRules":
        """
        Build rules from their raw configuration mapping.

        Args:
            rules: Mapping using the 'patterns', 'exclude-patterns',
                'dependency-type' and 'update-types' keys. Unknown keys
                are ignored.

        Returns:
            GroupRules: Compiled rules

        Raises:
            RulesConfigurationError: If a known key holds an invalid value
        """
        if rules is None:
            rules = {}
        if not isinstance(rules, Mapping):
            raise RulesConfigurationError("group rules must be a mapping")

        dependency_type = rules.get("dependency-type")
        if dependency_type is not None and dependency_type not in DEPENDENCY_TYPES:
            raise RulesConfigurationError(
                f"'dependency-type' must be one of {', '.join(DEPENDENCY_TYPES)}"
            )

        update_types = _string_list(rules, "update-types")
        if update_types is not None:
            unknown = [t for t in update_types if t not in UPDATE_TYPES]
            if unknown:
                raise RulesConfigurationError(
                    f"unknown update-types: {', '.join(unknown)}"
                )

        return cls(
            patterns=_string_list(rules, "patterns"),
            exclude_patterns=_string_list(rules, "exclude-patterns") or (),
            dependency_type=dependency_type,
            update_types=update_types,
            raw=dict(rules),
        )

    def matches(self, dependency: Dependency) -> bool:
        if self.matches_excluded_pattern(dependency.name):
            return False
        return self.matches_pattern(dependency.name) and self.matches_dependency_type(
            dependency
        )

    def matches_pattern(self, name: str) -> bool:
        # No patterns means every name passes
        if self.patterns is None:
            return True
        return any(wildcard_match(pattern, name) for pattern in self.patterns)

    def matches_excluded_pattern(self, name: str) -> bool:
        return any(wildcard_match(pattern, name) for pattern in self.exclude_patterns)

    def matches_dependency_type(self, dependency: Dependency) -> bool:
        if self.dependency_type is None:
            return True
        actual = PRODUCTION if dependency.production else DEVELOPMENT
        return actual == self.dependency_type

    def permits_highest_version(self) -> bool:
        if self.update_types is None:
            return True
        return "major" in self.update_types

    def ignored_update_types(self) -> List[str]:
        """Update types the group will never perform."""
        if self.update_types is None:
            return []
        return [t for t in UPDATE_TYPES if t not in self.update_types]

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw)
