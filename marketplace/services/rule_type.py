import logging
from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

import marketplace.repositories.rule_type as rule_type_repo
from marketplace.db.models.rule_type import RuleType as RuleTypeModel
from marketplace.schemas.rule_type import RuleTypeDefinition

logger = logging.getLogger(__name__)


class RuleTypeService(ABC):
    """Creates and updates rule types inside a project."""

    @abstractmethod
    def upsert_rule_type(
        self,
        project_id: UUID,
        provider: Any,
        subscription_id: UUID | None,
        rule_type: RuleTypeDefinition,
        qtx: Session,
    ) -> RuleTypeModel:
        """Insert the rule type into the project, or update the one with the same name."""
        pass


class SqlRuleTypeService(RuleTypeService):
    def upsert_rule_type(
        self,
        project_id: UUID,
        provider: Any,
        subscription_id: UUID | None,
        rule_type: RuleTypeDefinition,
        qtx: Session,
    ) -> RuleTypeModel:
        definition = rule_type.model_dump(mode="json", by_alias=True)
        existing = rule_type_repo.get_rule_type_by_name(qtx, project_id, rule_type.name)
        if existing is not None:
            logger.debug("Updating rule type %s in project %s", rule_type.name, project_id)
            return rule_type_repo.update_rule_type(
                qtx,
                existing,
                provider_id=provider.id,
                subscription_id=subscription_id,
                description=rule_type.description,
                definition=definition,
            )

        logger.debug("Creating rule type %s in project %s", rule_type.name, project_id)
        return rule_type_repo.create_rule_type(
            qtx,
            project_id=project_id,
            provider_id=provider.id,
            subscription_id=subscription_id,
            name=rule_type.name,
            description=rule_type.description,
            definition=definition,
        )
