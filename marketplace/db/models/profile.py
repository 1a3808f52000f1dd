import uuid

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    String,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from marketplace.db.base import Base


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_profiles_project_name"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False)
    provider_id = Column(Uuid, ForeignKey("providers.id"), nullable=False)
    subscription_id = Column(Uuid, ForeignKey("subscriptions.id"), nullable=True)
    name = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=True)
    definition = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    subscription = relationship("Subscription", backref="profiles")
