from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileDefinition(BaseModel):
    """A profile as shipped in a bundle (``profiles/*.yaml``).

    Rule selections are kept as extra fields; they are stored verbatim.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)
    display_name: str | None = None
    labels: list[str] = Field(default_factory=list)


class Profile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    display_name: str | None = None
    subscription_id: UUID | None = None


class ProfileCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Profile file name inside the bundle")
