import uuid

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.orm import Session

from marketplace.db.models.bundle import Bundle as BundleModel


def get_bundle(db: Session, namespace: str, name: str) -> BundleModel | None:
    """Get a bundle row by its namespace and name."""
    return (
        db.query(BundleModel)
        .filter(BundleModel.namespace == namespace, BundleModel.name == name)
        .first()
    )


def upsert_bundle(db: Session, namespace: str, name: str) -> BundleModel:
    """
    Ensure a bundle row exists for (namespace, name) and return it.

    This is a no-op if the pair already exists: the insert is discarded by the
    unique constraint, so concurrent callers converge on the same row.
    """
    # Detect database type for ON CONFLICT support
    dialect_name = db.get_bind().dialect.name
    if dialect_name == "postgresql":
        insert = postgresql.insert
    elif dialect_name == "sqlite":
        insert = sqlite.insert
    else:
        raise InvalidRequestError(f"bundle upsert is not supported on {dialect_name}")

    stmt = (
        insert(BundleModel)
        .values(id=uuid.uuid4(), namespace=namespace, name=name)
        .on_conflict_do_nothing(index_elements=["namespace", "name"])
    )
    db.execute(stmt)

    # fetch the row after insertion so we get the ID of whichever insert won
    return (
        db.query(BundleModel)
        .filter(BundleModel.namespace == namespace, BundleModel.name == name)
        .one()
    )
