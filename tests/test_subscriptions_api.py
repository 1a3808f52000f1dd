import uuid

import pytest
from sqlalchemy.orm import Session

from marketplace.api.deps import get_marketplace
from marketplace.db.models.bundle import Bundle as BundleModel
from marketplace.db.models.subscription import Subscription as SubscriptionModel
from marketplace.domain.project_context import ProjectContext
from marketplace.main import app
from marketplace.mindpak.sources import TarGZSource
from marketplace.services.marketplace import BundleRouterMarketplace
from marketplace.services.profile import SqlProfileService
from marketplace.services.rule_type import SqlRuleTypeService
from marketplace.services.subscription import SubscriptionService

HEALTHCHECK = {"namespace": "stacklok", "name": "healthcheck"}


def _subscriptions_url(project: ProjectContext) -> str:
    return f"/api/v1/projects/{project.id}/subscriptions"


# ============================================================================
# BUNDLE TESTS
# ============================================================================


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_bundles(client):
    """Test the bundles served by the marketplace are listed."""
    response = client.get("/api/v1/bundles")
    assert response.status_code == 200
    assert response.json() == [HEALTHCHECK]


# ============================================================================
# SUBSCRIBE TESTS
# ============================================================================


def test_subscribe_success(client, project: ProjectContext):
    """Test subscribing imports the bundle's rule types into the project."""
    response = client.post(_subscriptions_url(project), json=HEALTHCHECK)
    assert response.status_code == 204

    response = client.get(_subscriptions_url(project))
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["namespace"] == "stacklok"
    assert data[0]["name"] == "healthcheck"
    assert data[0]["current_version"] == "1.0.0"

    response = client.get(f"{_subscriptions_url(project)}/stacklok/healthcheck/rule-types")
    assert response.status_code == 200
    rule_types = response.json()
    assert [rt["name"] for rt in rule_types] == ["r1", "r2"]
    assert all(rt["subscription_id"] == data[0]["id"] for rt in rule_types)


def test_subscribe_twice_is_idempotent(client, db: Session, project: ProjectContext):
    """Test subscribing again succeeds without creating a second subscription."""
    assert client.post(_subscriptions_url(project), json=HEALTHCHECK).status_code == 204
    assert client.post(_subscriptions_url(project), json=HEALTHCHECK).status_code == 204

    assert db.query(SubscriptionModel).count() == 1
    assert len(client.get(_subscriptions_url(project)).json()) == 1


def test_subscribe_unknown_bundle(client, project: ProjectContext):
    """Test subscribing to a bundle no source serves returns 404."""
    response = client.post(
        _subscriptions_url(project), json={"namespace": "stacklok", "name": "unknown"}
    )
    assert response.status_code == 404
    assert response.json() == {
        "detail": "unknown bundle: stacklok/unknown",
        "code": "NOT_FOUND",
    }


def test_subscribe_unknown_project(client):
    response = client.post(f"/api/v1/projects/{uuid.uuid4()}/subscriptions", json=HEALTHCHECK)
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_subscribe_unknown_provider(client, project: ProjectContext):
    response = client.post(
        _subscriptions_url(project), params={"provider": "gitlab"}, json=HEALTHCHECK
    )
    assert response.status_code == 404
    assert "Provider not found" in response.json()["detail"]


def test_subscribe_with_named_provider(client, project: ProjectContext):
    response = client.post(
        _subscriptions_url(project), params={"provider": "github"}, json=HEALTHCHECK
    )
    assert response.status_code == 204


def test_subscribe_missing_fields(client, project: ProjectContext):
    response = client.post(_subscriptions_url(project), json={"namespace": "stacklok"})
    assert response.status_code == 422


def test_subscribe_failure_is_rolled_back(
    client, db: Session, project: ProjectContext, make_bundle
):
    """Test a failing rule type import leaves no subscription behind."""

    class FailingRuleTypeService(SqlRuleTypeService):
        def upsert_rule_type(self, project_id, provider, subscription_id, rule_type, qtx):
            if rule_type.name == "r2":
                raise RuntimeError("cannot upsert r2")
            return super().upsert_rule_type(
                project_id, provider, subscription_id, rule_type, qtx
            )

    market = BundleRouterMarketplace(
        [TarGZSource.from_path(make_bundle())],
        SubscriptionService(profiles=SqlProfileService(), rules=FailingRuleTypeService()),
    )
    app.dependency_overrides[get_marketplace] = lambda: market

    response = client.post(_subscriptions_url(project), json=HEALTHCHECK)
    assert response.status_code == 500
    assert response.json() == {
        "detail": "error while creating rules in project",
        "code": "MARKETPLACE_ERROR",
    }

    assert db.query(SubscriptionModel).count() == 0
    assert db.query(BundleModel).count() == 0


# ============================================================================
# PROFILE TESTS
# ============================================================================


@pytest.fixture(scope="function")
def subscribed(client, project: ProjectContext) -> ProjectContext:
    response = client.post(_subscriptions_url(project), json=HEALTHCHECK)
    assert response.status_code == 204
    return project


def test_add_profile_success(client, subscribed: ProjectContext):
    """Test installing a profile of a subscribed bundle."""
    url = f"{_subscriptions_url(subscribed)}/stacklok/healthcheck/profiles"

    response = client.post(url, json={"name": "hc.yaml"})
    assert response.status_code == 204

    response = client.get(url)
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["name"] == "hc"
    assert data[0]["display_name"] == "Profile hc.yaml"
    assert data[0]["subscription_id"] is not None


def test_add_profile_without_subscription(client, project: ProjectContext):
    """Test installing a profile before subscribing is a validation error."""
    response = client.post(
        f"{_subscriptions_url(project)}/stacklok/healthcheck/profiles",
        json={"name": "hc.yaml"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert "not subscribed to bundle" in response.json()["detail"]


def test_add_profile_missing_from_bundle(client, subscribed: ProjectContext):
    response = client.post(
        f"{_subscriptions_url(subscribed)}/stacklok/healthcheck/profiles",
        json={"name": "missing.yaml"},
    )
    assert response.status_code == 404
    assert response.json() == {
        "detail": "error while retrieving profile from bundle",
        "code": "NOT_FOUND",
    }


def test_add_profile_twice_conflicts(client, subscribed: ProjectContext):
    url = f"{_subscriptions_url(subscribed)}/stacklok/healthcheck/profiles"

    assert client.post(url, json={"name": "hc.yaml"}).status_code == 204
    response = client.post(url, json={"name": "hc.yaml"})

    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_RESOURCE"
    assert response.json()["detail"].startswith("error while creating profile in project")


def test_add_profile_unknown_bundle(client, project: ProjectContext):
    response = client.post(
        f"{_subscriptions_url(project)}/stacklok/unknown/profiles",
        json={"name": "hc.yaml"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "unknown bundle: stacklok/unknown"


def test_list_profiles_without_subscription(client, project: ProjectContext):
    response = client.get(f"{_subscriptions_url(project)}/stacklok/healthcheck/profiles")
    assert response.status_code == 404
