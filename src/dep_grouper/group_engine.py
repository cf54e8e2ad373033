"""
Assignment of detected dependencies to user-defined groups.

The engine is built once per update job from the job's group configuration.
After dependencies have been detected they are assigned to the groups in a
single pass. Dependencies may belong to more than one group; those matching
no group are collected so they can be updated individually.
"""

from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

from .dependency import Dependency
from .dependency_group import DependencyGroup, build_groups
from .error_handling import (
    ConfigurationError,
    ErrorCategory,
    ErrorHandler,
    get_error_handler,
)
from .structured_logging import (
    log_group_assignment,
    log_grouping_complete,
    log_grouping_start,
)

__all__ = ["ConfigurationError", "DependencyGroupEngine", "GroupingState"]

MISCONFIGURED_GROUP_HINTS = [
    "the group's 'pattern' rules are misspelled",
    "your configuration's 'allow' rules do not permit any of the dependencies "
    "that match the group",
    "the dependencies that match the group rules have been removed from your project",
]


class GroupingState(Enum):
    """Lifecycle of a grouping engine."""

    UNCONFIGURED = "unconfigured"
    CLASSIFIED = "classified"


class DependencyGroupEngine:
    """Keeps track of dependency groups and matches dependencies to them."""

    def __init__(
        self,
        dependency_groups: List[DependencyGroup],
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.dependency_groups = list(dependency_groups)
        self.error_handler = error_handler or get_error_handler()
        self.state = GroupingState.UNCONFIGURED
        self._ungrouped_dependencies: List[Dependency] = []

    @classmethod
    def from_job_config(
        cls, dependency_groups: Optional[Iterable[Mapping[str, Any]]], **kwargs
    ) -> "DependencyGroupEngine":
        """
        Create an engine from the raw 'dependency-groups' job configuration.

        Args:
            dependency_groups: Raw group definitions, each with a 'name' and
                optional 'rules' mapping

        Returns:
            DependencyGroupEngine: Engine with one group per definition,
                in configuration order
        """
        return cls(build_groups(list(dependency_groups or [])), **kwargs)

    from_configuration = from_job_config

    @property
    def groups_calculated(self) -> bool:
        return self.state is GroupingState.CLASSIFIED

    def find_group(self, name: str) -> Optional[DependencyGroup]:
        return next(
            (group for group in self.dependency_groups if group.name == name), None
        )

    def assign_to_groups(self, dependencies: Iterable[Dependency]) -> None:
        """
        Record every dependency in each group whose rules it matches.

        Args:
            dependencies: Dependencies detected for the job, in the order
                they should appear within groups

        Raises:
            ConfigurationError: If groups have already been assigned
        """
        if self.groups_calculated:
            raise ConfigurationError("dependency groups have already been configured!")

        dependencies = list(dependencies)
        log_grouping_start(len(self.dependency_groups), len(dependencies))

        if self.dependency_groups:
            for dependency in dependencies:
                matched_groups = [
                    group for group in self.dependency_groups if group.contains(dependency)
                ]
                for group in matched_groups:
                    group.record_match(dependency)

                log_group_assignment(
                    dependency.name, [group.name for group in matched_groups]
                )
                if not matched_groups:
                    self._ungrouped_dependencies.append(dependency)
        else:
            self._ungrouped_dependencies = dependencies

        empty_groups = self._validate_groups()
        self.state = GroupingState.CLASSIFIED

        log_grouping_complete(
            grouped_count=len(dependencies) - len(self._ungrouped_dependencies),
            ungrouped_count=len(self._ungrouped_dependencies),
            empty_groups=len(empty_groups),
        )

    def ungrouped_dependencies(self) -> List[Dependency]:
        """
        Dependencies that still need an individual update.

        Besides those matching no group, this includes every member of a
        group that will not update to the highest version possible, so the
        remaining updates can be attempted on their own. A dependency in
        several such groups is listed once per group.
        """
        return self._ungrouped_dependencies + self._dependencies_with_ungrouped_update_types()

    def _dependencies_with_ungrouped_update_types(self) -> List[Dependency]:
        # TODO: only include dependencies with passed-over updates once the
        # update checker can report the highest version with and without
        # the group's update-type restrictions.
        return [
            dependency
            for group in self.dependency_groups
            if not group.targets_highest_versions_possible()
            for dependency in group.dependencies
        ]

    def _validate_groups(self) -> List[DependencyGroup]:
        empty_groups = [group for group in self.dependency_groups if not group.dependencies]
        if empty_groups:
            self._warn_misconfigured_groups(empty_groups)
        return empty_groups

    def _warn_misconfigured_groups(self, groups: List[DependencyGroup]) -> None:
        group_lines = "\n".join(f"- {group.name}" for group in groups)
        hint_lines = "\n".join(f"- {hint}" for hint in MISCONFIGURED_GROUP_HINTS)
        message = (
            "Please check your configuration as there are groups no dependencies match:\n"
            f"{group_lines}\n"
            "\n"
            "This can happen if:\n"
            f"{hint_lines}\n"
        )

        self.error_handler.warning(
            ErrorCategory.CONFIGURATION,
            message,
            "group_engine",
            "assign_to_groups",
            details={"empty_groups": [group.name for group in groups]},
        )
