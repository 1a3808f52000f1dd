from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RuleTypeDefinition(BaseModel):
    """A rule type as shipped in a bundle (``rule_types/*.yaml``)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., min_length=1)
    display_name: str | None = None
    description: str = ""
    version: str | None = None
    definition: dict[str, Any] = Field(default_factory=dict, alias="def")


class RuleType(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    subscription_id: UUID | None = None
