from uuid import UUID

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

import marketplace.repositories.project as project_repo
from marketplace.db.base import SessionLocal
from marketplace.domain.project_context import ProjectContext
from marketplace.errors import NotFoundError
from marketplace.services.marketplace import Marketplace


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_marketplace(request: Request) -> Marketplace:
    """The marketplace built at startup (see ``marketplace.main``)."""
    return request.app.state.marketplace


def get_project_context(
    project_id: UUID,
    provider: str | None = Query(
        default=None, description="Provider name; defaults to the project's first provider"
    ),
    db: Session = Depends(get_db),
) -> ProjectContext:
    """Resolve the project and the provider that created records are linked to."""
    project = project_repo.get_project_by_id(db, project_id)
    if project is None:
        raise NotFoundError(f"Project with id {project_id} not found")

    db_provider = project_repo.get_provider(db, project_id, provider)
    if db_provider is None:
        raise NotFoundError(f"Provider not found for project {project_id}")

    return ProjectContext(id=project.id, provider=db_provider)
