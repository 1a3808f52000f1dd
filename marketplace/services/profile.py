import logging
from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

import marketplace.repositories.profile as profile_repo
from marketplace.db.models.profile import Profile as ProfileModel
from marketplace.errors import DuplicateResourceError
from marketplace.schemas.profile import ProfileDefinition

logger = logging.getLogger(__name__)


class ProfileService(ABC):
    """Creates profiles inside a project."""

    @abstractmethod
    def create_profile(
        self,
        project_id: UUID,
        provider: Any,
        subscription_id: UUID | None,
        profile: ProfileDefinition,
        qtx: Session,
    ) -> ProfileModel:
        """
        Create the profile in the project.

        Raises:
            DuplicateResourceError: If the project already has a profile with that name
        """
        pass


class SqlProfileService(ProfileService):
    def create_profile(
        self,
        project_id: UUID,
        provider: Any,
        subscription_id: UUID | None,
        profile: ProfileDefinition,
        qtx: Session,
    ) -> ProfileModel:
        if profile_repo.get_profile_by_name(qtx, project_id, profile.name) is not None:
            raise DuplicateResourceError(
                f"A profile named {profile.name} already exists in project {project_id}"
            )

        db_profile = profile_repo.create_profile(
            qtx,
            project_id=project_id,
            provider_id=provider.id,
            subscription_id=subscription_id,
            name=profile.name,
            display_name=profile.display_name,
            definition=profile.model_dump(mode="json"),
        )
        logger.info("Created profile %s in project %s", profile.name, project_id)
        return db_profile
