from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.db.models.project import Project as ProjectModel
from marketplace.db.models.project import Provider as ProviderModel


def get_project_by_id(db: Session, project_id: UUID) -> ProjectModel | None:
    """Get a project by ID."""
    return db.query(ProjectModel).filter(ProjectModel.id == project_id).first()


def create_project(db: Session, name: str) -> ProjectModel:
    """Create a new project. Pure data access - the caller commits."""
    db_project = ProjectModel(name=name)
    db.add(db_project)
    db.flush()
    return db_project


def get_provider(
    db: Session, project_id: UUID, name: str | None = None
) -> ProviderModel | None:
    """Get a provider of the project by name, or its first provider when no name is given."""
    query = db.query(ProviderModel).filter(ProviderModel.project_id == project_id)
    if name is not None:
        query = query.filter(ProviderModel.name == name)
    return query.order_by(ProviderModel.name).first()


def create_provider(db: Session, project_id: UUID, name: str) -> ProviderModel:
    """Create a new provider in the project. Pure data access - the caller commits."""
    db_provider = ProviderModel(project_id=project_id, name=name)
    db.add(db_provider)
    db.flush()
    return db_provider
