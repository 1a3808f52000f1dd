import uuid

from sqlalchemy import Column, String, UniqueConstraint, Uuid

from marketplace.db.base import Base


class Bundle(Base):
    __tablename__ = "bundles"
    __table_args__ = (
        UniqueConstraint("namespace", "name", name="uq_bundles_namespace_name"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    namespace = Column(String(63), nullable=False)
    name = Column(String(63), nullable=False)
