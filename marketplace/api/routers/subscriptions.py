from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import marketplace.repositories.profile as profile_repo
import marketplace.repositories.rule_type as rule_type_repo
import marketplace.repositories.subscription as subscription_repo
from marketplace.api.deps import get_db, get_marketplace, get_project_context
from marketplace.db.models.subscription import Subscription as SubscriptionModel
from marketplace.domain.project_context import ProjectContext
from marketplace.errors import NotFoundError
from marketplace.mindpak import BundleID
from marketplace.schemas.profile import Profile, ProfileCreate
from marketplace.schemas.rule_type import RuleType
from marketplace.schemas.subscription import Subscription, SubscriptionCreate
from marketplace.services.marketplace import Marketplace

router = APIRouter(prefix="/projects/{project_id}/subscriptions", tags=["subscriptions"])


def _get_subscription_or_404(
    db: Session, project_id: UUID, namespace: str, name: str
) -> SubscriptionModel:
    subscription = subscription_repo.get_subscription_by_project_bundle(
        db, namespace, name, project_id
    )
    if subscription is None:
        raise NotFoundError(f"Project {project_id} is not subscribed to {namespace}/{name}")
    return subscription


@router.get("", response_model=list[Subscription])
def list_subscriptions(
    project: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
):
    """
    List the bundles the project is subscribed to.
    """
    rows = subscription_repo.list_subscriptions_by_project(db, project.id)
    return [
        Subscription(
            id=subscription.id,
            namespace=bundle.namespace,
            name=bundle.name,
            current_version=subscription.current_version,
        )
        for subscription, bundle in rows
    ]


@router.post("", status_code=status.HTTP_204_NO_CONTENT)
def subscribe(
    subscription_data: SubscriptionCreate,
    project: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
    market: Marketplace = Depends(get_marketplace),
):
    """
    Subscribe the project to a bundle and import all of the bundle's rule types.

    Subscribing again to the same bundle is a no-op.
    """
    bundle_id = BundleID(subscription_data.namespace, subscription_data.name)
    try:
        market.subscribe(project, bundle_id, db)
        db.commit()
    except Exception:
        db.rollback()
        raise


@router.get("/{namespace}/{name}/rule-types", response_model=list[RuleType])
def list_subscription_rule_types(
    namespace: str,
    name: str,
    project: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
):
    """
    List the rule types imported into the project from a bundle.
    """
    subscription = _get_subscription_or_404(db, project.id, namespace, name)
    rule_types = rule_type_repo.list_rule_types_by_subscription(db, subscription.id)
    return [RuleType.model_validate(rt) for rt in rule_types]


@router.get("/{namespace}/{name}/profiles", response_model=list[Profile])
def list_subscription_profiles(
    namespace: str,
    name: str,
    project: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
):
    """
    List the profiles installed into the project from a bundle.
    """
    subscription = _get_subscription_or_404(db, project.id, namespace, name)
    profiles = profile_repo.list_profiles_by_subscription(db, subscription.id)
    return [Profile.model_validate(p) for p in profiles]


@router.post("/{namespace}/{name}/profiles", status_code=status.HTTP_204_NO_CONTENT)
def add_profile(
    namespace: str,
    name: str,
    profile_data: ProfileCreate,
    project: ProjectContext = Depends(get_project_context),
    db: Session = Depends(get_db),
    market: Marketplace = Depends(get_marketplace),
):
    """
    Install a profile from a bundle the project is subscribed to.
    """
    try:
        market.add_profile(project, BundleID(namespace, name), profile_data.name, db)
        db.commit()
    except Exception:
        db.rollback()
        raise
