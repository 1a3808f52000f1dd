from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.db.models.bundle import Bundle as BundleModel
from marketplace.db.models.subscription import Subscription as SubscriptionModel


def get_subscription_by_project_bundle(
    db: Session, namespace: str, name: str, project_id: UUID
) -> SubscriptionModel | None:
    """Get the subscription of a project to the bundle identified by namespace and name."""
    return (
        db.query(SubscriptionModel)
        .join(BundleModel, SubscriptionModel.bundle_id == BundleModel.id)
        .filter(
            BundleModel.namespace == namespace,
            BundleModel.name == name,
            SubscriptionModel.project_id == project_id,
        )
        .first()
    )


def list_subscriptions_by_project(
    db: Session, project_id: UUID
) -> list[tuple[SubscriptionModel, BundleModel]]:
    """List the subscriptions of a project together with their bundle rows."""
    return (
        db.query(SubscriptionModel, BundleModel)
        .join(BundleModel, SubscriptionModel.bundle_id == BundleModel.id)
        .filter(SubscriptionModel.project_id == project_id)
        .order_by(BundleModel.namespace, BundleModel.name)
        .all()
    )


def create_subscription(
    db: Session, project_id: UUID, bundle_id: UUID, current_version: str
) -> SubscriptionModel:
    """
    Create a new subscription. Pure data access - no business logic.

    The row is flushed, not committed, so a duplicate (project_id, bundle_id)
    surfaces here as an IntegrityError.
    """
    db_subscription = SubscriptionModel(
        project_id=project_id,
        bundle_id=bundle_id,
        current_version=current_version,
    )
    db.add(db_subscription)
    db.flush()
    return db_subscription
