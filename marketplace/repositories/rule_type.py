from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.db.models.rule_type import RuleType as RuleTypeModel


def get_rule_type_by_name(db: Session, project_id: UUID, name: str) -> RuleTypeModel | None:
    """Get a rule type of a project by name."""
    return (
        db.query(RuleTypeModel)
        .filter(RuleTypeModel.project_id == project_id, RuleTypeModel.name == name)
        .first()
    )


def list_rule_types_by_subscription(
    db: Session, subscription_id: UUID
) -> list[RuleTypeModel]:
    """List the rule types imported through a subscription."""
    return (
        db.query(RuleTypeModel)
        .filter(RuleTypeModel.subscription_id == subscription_id)
        .order_by(RuleTypeModel.name)
        .all()
    )


def create_rule_type(
    db: Session,
    project_id: UUID,
    provider_id: UUID,
    subscription_id: UUID | None,
    name: str,
    description: str,
    definition: dict[str, Any],
) -> RuleTypeModel:
    """Create a new rule type. Pure data access - the caller commits."""
    db_rule_type = RuleTypeModel(
        project_id=project_id,
        provider_id=provider_id,
        subscription_id=subscription_id,
        name=name,
        description=description,
        definition=definition,
    )
    db.add(db_rule_type)
    db.flush()
    return db_rule_type


def update_rule_type(
    db: Session,
    rule_type: RuleTypeModel,
    provider_id: UUID,
    subscription_id: UUID | None,
    description: str,
    definition: dict[str, Any],
) -> RuleTypeModel:
    """Overwrite the mutable fields of a rule type."""
    rule_type.provider_id = provider_id
    rule_type.subscription_id = subscription_id
    rule_type.description = description
    rule_type.definition = definition
    db.flush()
    return rule_type
