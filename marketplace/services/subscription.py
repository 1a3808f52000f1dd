"""Subscriptions link a project to a marketplace bundle.

Every method runs on the caller's session (``qtx``) and never commits or
rolls back: the caller owns the transaction and must roll it back when an
operation raises, so a failed subscribe leaves neither a bundle row nor a
subscription behind.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import marketplace.repositories.bundle as bundle_repo
import marketplace.repositories.subscription as subscription_repo
from marketplace.db.models.subscription import Subscription as SubscriptionModel
from marketplace.domain.project_context import ProjectContext
from marketplace.errors import (
    BundleProfileError,
    BundleUpsertError,
    NotSubscribedError,
    ProfileCreateError,
    QueryError,
    RulesCreateError,
    SubscriptionCreateError,
)
from marketplace.mindpak.manifest import Metadata
from marketplace.mindpak.reader import BundleReader
from marketplace.schemas.rule_type import RuleTypeDefinition
from marketplace.services.profile import ProfileService
from marketplace.services.rule_type import RuleTypeService

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(self, profiles: ProfileService, rules: RuleTypeService):
        self.profiles = profiles
        self.rules = rules

    def subscribe(
        self, project: ProjectContext, bundle: BundleReader, qtx: Session
    ) -> None:
        """
        Subscribe the project to the bundle and import all of its rule types.

        A no-op when the project is already subscribed.

        Raises:
            QueryError: If looking up the existing subscription fails
            BundleUpsertError: If the bundle row cannot be ensured
            SubscriptionCreateError: If the subscription cannot be inserted
            RulesCreateError: If any rule type cannot be read or upserted
        """
        metadata = bundle.get_metadata()
        try:
            existing = subscription_repo.get_subscription_by_project_bundle(
                qtx, metadata.namespace, metadata.name, project.id
            )
        except SQLAlchemyError as e:
            raise QueryError("error while querying subscriptions") from e

        if existing is not None:
            logger.debug("Project %s already subscribed to %s", project.id, metadata.id)
            return

        try:
            db_bundle = bundle_repo.upsert_bundle(qtx, metadata.namespace, metadata.name)
        except SQLAlchemyError as e:
            raise BundleUpsertError("error while ensuring bundle exists") from e

        try:
            subscription = subscription_repo.create_subscription(
                qtx,
                project_id=project.id,
                bundle_id=db_bundle.id,
                current_version=metadata.version,
            )
        except SQLAlchemyError as e:
            raise SubscriptionCreateError("error while creating subscription") from e

        def upsert(rule_type: RuleTypeDefinition) -> None:
            self.rules.upsert_rule_type(
                project.id, project.provider, subscription.id, rule_type, qtx
            )

        # Failures from the bundle and from the rule type service alike
        try:
            bundle.for_each_rule_type(upsert)
        except Exception as e:
            raise RulesCreateError("error while creating rules in project") from e

        logger.info(
            "Subscribed project %s to bundle %s at version %s",
            project.id,
            metadata.id,
            metadata.version,
        )

    def create_profile(
        self,
        project: ProjectContext,
        bundle: BundleReader,
        profile_name: str,
        qtx: Session,
    ) -> None:
        """
        Create the named profile from the bundle in the project.

        Raises:
            NotSubscribedError: If the project is not subscribed to the bundle
            QueryError: If looking up the subscription fails
            BundleProfileError: If the profile cannot be read from the bundle
            ProfileCreateError: If the profile service fails
        """
        # ensure project is subscribed to this bundle before writing anything
        subscription = self._find_subscription(qtx, project, bundle.get_metadata())

        try:
            profile = bundle.get_profile(profile_name)
        except Exception as e:
            raise BundleProfileError("error while retrieving profile from bundle") from e

        try:
            self.profiles.create_profile(
                project.id, project.provider, subscription.id, profile, qtx
            )
        except Exception as e:
            raise ProfileCreateError("error while creating profile in project") from e

        logger.info("Installed profile %s in project %s", profile_name, project.id)

    def _find_subscription(
        self, qtx: Session, project: ProjectContext, metadata: Metadata
    ) -> SubscriptionModel:
        try:
            subscription = subscription_repo.get_subscription_by_project_bundle(
                qtx, metadata.namespace, metadata.name, project.id
            )
        except SQLAlchemyError as e:
            raise QueryError("error while querying subscriptions") from e

        if subscription is None:
            raise NotSubscribedError(
                f"project {project.id} is not subscribed to bundle {metadata.id}"
            )
        return subscription
