import uuid

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from marketplace.db.base import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), unique=True, nullable=False)


class Provider(Base):
    __tablename__ = "providers"
    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_providers_project_name"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False)
    name = Column(String(255), nullable=False)

    # Relationship
    project = relationship("Project", backref="providers")
