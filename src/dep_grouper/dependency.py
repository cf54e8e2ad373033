# In src/dep_grouper/dependency.py
from dataclasses import dataclass
from typing import Optional

PRODUCTION = "production"
DEVELOPMENT = "development"
DEPENDENCY_TYPES = (PRODUCTION, DEVELOPMENT)


@dataclass(frozen=True, eq=False)
class Dependency:
    """
    A unified internal data structure to represent a dependency.

    Dependencies compare by identity: two entries with the same fields are
    still two dependencies, and one object listed twice is the same one.
    """

    name: str
    version: str
    source_file: str = ""
    dependency_type: str = PRODUCTION
    package_manager: Optional[str] = None

    @property
    def production(self) -> bool:
        return self.dependency_type == PRODUCTION

    def __str__(self) -> str:
        return f"{self.name} {self.version}" if self.version else self.name
