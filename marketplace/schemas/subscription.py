from uuid import UUID

from pydantic import BaseModel, Field


class Subscription(BaseModel):
    id: UUID
    namespace: str
    name: str
    current_version: str


class SubscriptionCreate(BaseModel):
    namespace: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class Bundle(BaseModel):
    namespace: str
    name: str
