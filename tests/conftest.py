import io
import json
import os
import tarfile
import tempfile
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_marketplace.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"

import pytest
import yaml
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

import marketplace.repositories.project as project_repo
from marketplace.domain.project_context import ProjectContext
from marketplace.main import app
from marketplace.mindpak.sources import TarGZSource
from marketplace.services.marketplace import BundleRouterMarketplace
from marketplace.services.profile import SqlProfileService
from marketplace.services.rule_type import SqlRuleTypeService
from marketplace.services.subscription import SubscriptionService

ROOT_DIR = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="function")
def db_session(tmp_path):
    """Create a fresh database for each test and run migrations."""
    test_db_url = f"sqlite:///{tmp_path / 'test.db'}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    # Enforce foreign keys so invalid links fail like they would on PostgreSQL
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        test_engine.dispose()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def make_bundle(tmp_path):
    """Return a factory writing a bundle tarball and returning its path."""

    def _make_bundle(
        namespace: str = "stacklok",
        name: str = "healthcheck",
        version: str = "1.0.0",
        rule_types: list[str] | None = None,
        profiles: list[str] | None = None,
        extra_files: dict[str, bytes] | None = None,
    ) -> Path:
        rule_types = ["r1", "r2"] if rule_types is None else rule_types
        profiles = ["hc.yaml"] if profiles is None else profiles

        files: dict[str, bytes] = {
            "manifest.json": json.dumps(
                {
                    "metadata": {
                        "namespace": namespace,
                        "name": name,
                        "version": version,
                        "date": "2026-09-01T10:00:00Z",
                    },
                    "files": {"profiles": [], "ruleTypes": []},
                }
            ).encode(),
        }
        for rule_type in rule_types:
            files[f"rule_types/{rule_type}.yaml"] = yaml.safe_dump(
                {
                    "name": rule_type,
                    "description": f"Rule type {rule_type}",
                    "def": {"in_entity": "repository"},
                }
            ).encode()
        for profile in profiles:
            files[f"profiles/{profile}"] = yaml.safe_dump(
                {
                    "name": profile.removesuffix(".yaml"),
                    "display_name": f"Profile {profile}",
                    "repository": [{"type": rt, "def": {}} for rt in rule_types],
                }
            ).encode()
        files.update(extra_files or {})

        path = tmp_path / f"{namespace}-{name}-{version}.tar.gz"
        with tarfile.open(path, "w:gz") as tar:
            for file_name, data in files.items():
                info = tarfile.TarInfo(name=file_name)
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
        return path

    return _make_bundle


@pytest.fixture(scope="function")
def project(db: Session) -> ProjectContext:
    """Create a project with a single provider."""
    db_project = project_repo.create_project(db, name="test-project")
    db_provider = project_repo.create_provider(db, db_project.id, name="github")
    db.commit()
    return ProjectContext(id=db_project.id, provider=db_provider)


@pytest.fixture(scope="function")
def subscription_service() -> SubscriptionService:
    return SubscriptionService(profiles=SqlProfileService(), rules=SqlRuleTypeService())


@pytest.fixture(scope="function")
def healthcheck_marketplace(make_bundle, subscription_service) -> BundleRouterMarketplace:
    """A marketplace serving stacklok/healthcheck 1.0.0 with rule types r1 and r2."""
    source = TarGZSource.from_path(make_bundle())
    return BundleRouterMarketplace([source], subscription_service)


@pytest.fixture(scope="function")
def client(db_session, healthcheck_marketplace):
    """Create a test client with database and marketplace overrides."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from marketplace.api.deps import get_db, get_marketplace

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_marketplace] = lambda: healthcheck_marketplace

    yield TestClient(app)

    app.dependency_overrides.clear()
