import uuid

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from marketplace.db.base import Base


class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("project_id", "bundle_id", name="uq_subscriptions_project_bundle"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False)
    bundle_id = Column(Uuid, ForeignKey("bundles.id"), nullable=False)
    current_version = Column(String(255), nullable=False)

    # Relationships
    project = relationship("Project", backref="subscriptions")
    bundle = relationship("Bundle", backref="subscriptions")
