"""
A named, user-defined bucket of dependencies.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .dependency import Dependency
from .rules import GroupRules, MatchingRules


class DependencyGroup:
    """One group from the job configuration and the dependencies it matched."""

    def __init__(
        self,
        name: str,
        rules: Union[MatchingRules, Mapping[str, Any], None] = None,
    ):
        """
        Initialize a dependency group.

        Args:
            name: Group name, unique within a job
            rules: Matching rules, either already built or as the raw
                configuration mapping
        """
        self.name = name
        if isinstance(rules, MatchingRules):
            self.rules = rules
        else:
            self.rules = GroupRules.from_config(rules)
        self.dependencies: List[Dependency] = []

    def contains(self, dependency: Dependency) -> bool:
        """Check whether the dependency satisfies this group's rules."""
        return self.rules.matches(dependency)

    def record_match(self, dependency: Dependency) -> None:
        if dependency not in self.dependencies:
            self.dependencies.append(dependency)

    def targets_highest_versions_possible(self) -> bool:
        return self.rules.permits_highest_version()

    def ignored_update_types(self) -> List[str]:
        ignored = getattr(self.rules, "ignored_update_types", None)
        return ignored() if ignored else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "rules": self.rules.to_dict(),
            "targets_highest_versions_possible": self.targets_highest_versions_possible(),
            "dependencies": [
                {"name": dep.name, "version": dep.version} for dep in self.dependencies
            ],
        }

    def to_config_yaml(self) -> str:
        """Render the group as it would appear in a configuration file."""
        return yaml.safe_dump(
            {"groups": {self.name: self.rules.to_dict()}}, sort_keys=False
        )

    def __repr__(self) -> str:
        return (
            f"DependencyGroup(name={self.name!r}, "
            f"dependencies={[dep.name for dep in self.dependencies]!r})"
        )


def build_groups(raw_groups: Optional[List[Mapping[str, Any]]]) -> List[DependencyGroup]:
    """Build groups from raw definitions, keeping their order."""
    return [
        DependencyGroup(name=group["name"], rules=group.get("rules"))
        for group in raw_groups or []
    ]
