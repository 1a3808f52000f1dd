from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.db.models.profile import Profile as ProfileModel


def get_profile_by_name(db: Session, project_id: UUID, name: str) -> ProfileModel | None:
    """Get a profile of a project by name."""
    return (
        db.query(ProfileModel)
        .filter(ProfileModel.project_id == project_id, ProfileModel.name == name)
        .first()
    )


def list_profiles_by_subscription(db: Session, subscription_id: UUID) -> list[ProfileModel]:
    """List the profiles installed through a subscription."""
    return (
        db.query(ProfileModel)
        .filter(ProfileModel.subscription_id == subscription_id)
        .order_by(ProfileModel.name)
        .all()
    )


def create_profile(
    db: Session,
    project_id: UUID,
    provider_id: UUID,
    subscription_id: UUID | None,
    name: str,
    display_name: str | None,
    definition: dict[str, Any],
) -> ProfileModel:
    """Create a new profile. Pure data access - the caller commits."""
    db_profile = ProfileModel(
        project_id=project_id,
        provider_id=provider_id,
        subscription_id=subscription_id,
        name=name,
        display_name=display_name,
        definition=definition,
    )
    db.add(db_profile)
    db.flush()
    return db_profile
