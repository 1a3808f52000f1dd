import logging
from abc import ABC, abstractmethod
from typing import Iterable

from sqlalchemy.orm import Session

from marketplace.core.config import TARBALL_SOURCE, MarketplaceConfig
from marketplace.domain.project_context import ProjectContext
from marketplace.errors import BundleFetchError, ConfigInvalidError, UnknownBundleError
from marketplace.mindpak import BundleError, BundleID
from marketplace.mindpak.reader import BundleReader
from marketplace.mindpak.sources import BundleSource, TarGZSource
from marketplace.services.profile import ProfileService
from marketplace.services.rule_type import RuleTypeService
from marketplace.services.subscription import SubscriptionService

logger = logging.getLogger(__name__)


class Marketplace(ABC):
    """Subscribes projects to bundles and installs bundle profiles into them."""

    @abstractmethod
    def subscribe(self, project: ProjectContext, bundle_id: BundleID, qtx: Session) -> None:
        """Subscribe the project to the bundle, importing its rule types."""
        pass

    @abstractmethod
    def add_profile(
        self,
        project: ProjectContext,
        bundle_id: BundleID,
        profile_name: str,
        qtx: Session,
    ) -> None:
        """Install one profile of a subscribed bundle into the project."""
        pass

    @abstractmethod
    def list_bundles(self) -> list[BundleID]:
        """List the bundles this marketplace can serve."""
        pass


class BundleRouterMarketplace(Marketplace):
    """Routes each bundle id to the source that serves it.

    The routing table is built once from the sources and never changes.
    """

    def __init__(
        self,
        sources: Iterable[BundleSource],
        subscriptions: SubscriptionService,
    ):
        self.subscriptions = subscriptions
        self._sources: dict[BundleID, BundleSource] = {}

        for source in sources:
            try:
                bundle_ids = source.list_bundles()
            except Exception as e:
                raise BundleFetchError("error while listing bundles") from e

            for bundle_id in bundle_ids:
                if bundle_id in self._sources:
                    logger.warning(
                        "Bundle %s offered by more than one source, using the last one",
                        bundle_id,
                    )
                self._sources[bundle_id] = source

        logger.info(
            "Marketplace serving %d bundles: %s",
            len(self._sources),
            ", ".join(str(b) for b in self._sources),
        )

    def subscribe(self, project: ProjectContext, bundle_id: BundleID, qtx: Session) -> None:
        bundle = self._get_bundle(bundle_id)
        self.subscriptions.subscribe(project, bundle, qtx)

    def add_profile(
        self,
        project: ProjectContext,
        bundle_id: BundleID,
        profile_name: str,
        qtx: Session,
    ) -> None:
        bundle = self._get_bundle(bundle_id)
        self.subscriptions.create_profile(project, bundle, profile_name, qtx)

    def list_bundles(self) -> list[BundleID]:
        return list(self._sources)

    def _get_bundle(self, bundle_id: BundleID) -> BundleReader:
        source = self._sources.get(bundle_id)
        if source is None:
            raise UnknownBundleError(f"unknown bundle: {bundle_id}")

        try:
            return source.get_bundle(bundle_id)
        except Exception as e:
            raise BundleFetchError("error while retrieving bundle") from e


class NoopMarketplace(Marketplace):
    """Used when the marketplace is disabled: every operation succeeds and does nothing."""

    def subscribe(self, project: ProjectContext, bundle_id: BundleID, qtx: Session) -> None:
        logger.debug("Marketplace disabled, not subscribing %s to %s", project.id, bundle_id)

    def add_profile(
        self,
        project: ProjectContext,
        bundle_id: BundleID,
        profile_name: str,
        qtx: Session,
    ) -> None:
        logger.debug(
            "Marketplace disabled, not adding profile %s of %s to %s",
            profile_name,
            bundle_id,
            project.id,
        )

    def list_bundles(self) -> list[BundleID]:
        return []


def new_marketplace_from_config(
    config: MarketplaceConfig,
    profiles: ProfileService,
    rules: RuleTypeService,
) -> Marketplace:
    """
    Build the marketplace described by the configuration.

    Raises:
        ConfigInvalidError: If enabled without sources, if a source has an
            unknown type, or if a source cannot be loaded
    """
    if not config.enabled:
        return NoopMarketplace()

    if not config.sources:
        raise ConfigInvalidError("marketplace is enabled but no sources are configured")

    sources: list[BundleSource] = []
    for cfg in config.sources:
        if cfg.type != TARBALL_SOURCE:
            raise ConfigInvalidError(f"unexpected source type: {cfg.type}")
        try:
            sources.append(TarGZSource.from_path(cfg.location))
        except BundleError as e:
            raise ConfigInvalidError(
                f"error while loading bundle source {cfg.location}"
            ) from e

    return BundleRouterMarketplace(sources, SubscriptionService(profiles, rules))
