from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from marketplace.mindpak import BundleID, BundleNotFoundError
from marketplace.mindpak.bundle import Bundle
from marketplace.mindpak.reader import BundleReader

logger = logging.getLogger(__name__)


class BundleSource(ABC):
    """Somewhere bundles can be fetched from."""

    @abstractmethod
    def get_bundle(self, bundle_id: BundleID) -> BundleReader:
        """
        Return a reader for the bundle.

        Raises:
            BundleNotFoundError: If this source does not serve the bundle
        """
        pass

    @abstractmethod
    def list_bundles(self) -> list[BundleID]:
        """List the ids of every bundle this source serves."""
        pass

    @abstractmethod
    def needs_update(self, bundle_id: BundleID, current_version: str) -> bool:
        """Tell whether the served bundle is newer than ``current_version``."""
        pass


class TarGZSource(BundleSource):
    """Serves the single bundle contained in one ``.tar.gz`` file."""

    def __init__(self, bundle: Bundle):
        self._bundle = bundle

    @classmethod
    def from_path(cls, path: str | Path) -> TarGZSource:
        """Load and verify the tarball eagerly so bad bundles fail at startup."""
        bundle = Bundle.from_tar_gz(path)
        bundle.verify()
        logger.info("Loaded bundle %s from %s", bundle.id, path)
        return cls(bundle)

    def get_bundle(self, bundle_id: BundleID) -> BundleReader:
        if bundle_id != self._bundle.id:
            raise BundleNotFoundError(f"bundle {bundle_id} not found in source")
        return self._bundle

    def list_bundles(self) -> list[BundleID]:
        return [self._bundle.id]

    def needs_update(self, bundle_id: BundleID, current_version: str) -> bool:
        # TODO: compare semantic versions once subscriptions can be upgraded
        return False
