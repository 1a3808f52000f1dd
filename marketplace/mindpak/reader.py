from abc import ABC, abstractmethod
from typing import Callable

from marketplace.mindpak.manifest import Metadata
from marketplace.schemas.profile import ProfileDefinition
from marketplace.schemas.rule_type import RuleTypeDefinition


class BundleReader(ABC):
    """Read-only view of a loaded bundle."""

    @abstractmethod
    def get_metadata(self) -> Metadata:
        """Return the namespace, name and version of the bundle."""
        pass

    @abstractmethod
    def get_profile(self, name: str) -> ProfileDefinition:
        """
        Return one profile by name.

        Raises:
            ProfileNotFoundError: If the bundle does not ship the profile
        """
        pass

    @abstractmethod
    def for_each_rule_type(self, visit: Callable[[RuleTypeDefinition], None]) -> None:
        """
        Call ``visit`` with every rule type of the bundle.

        Stops at the first exception raised by ``visit`` and lets it propagate.
        """
        pass
