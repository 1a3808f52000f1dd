"""Read-only support for mindpak bundles.

A bundle is a gzipped tarball (or a directory during development) with this
layout::

    manifest.json
    profiles/<name>.yaml
    rule_types/<name>.yaml

This package only loads bundles and serves them through the
:class:`~marketplace.mindpak.reader.BundleReader` and
:class:`~marketplace.mindpak.sources.BundleSource` interfaces.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

MANIFEST_FILE_NAME = "manifest.json"
PATH_PROFILES = "profiles"
PATH_RULE_TYPES = "rule_types"

# Used to check a bundle name or namespace
VALID_NAME_REGEX = re.compile(r"^[a-zA-Z0-9](?:[-_a-zA-Z0-9]{0,61}[a-zA-Z0-9])?$")


class BundleError(Exception):
    """Base exception for bundle loading and lookup failures."""

    pass


class InvalidBundleError(BundleError):
    """Raised when bundle contents cannot be read or do not follow the layout."""

    pass


class BundleNotFoundError(BundleError):
    """Raised by a source asked for a bundle it does not serve."""

    pass


class ProfileNotFoundError(BundleError):
    """Raised when a bundle does not contain the requested profile."""

    pass


@dataclass(frozen=True, slots=True)
class BundleID:
    """Identity of a bundle: the publisher namespace plus the bundle name."""

    namespace: str
    name: str

    def __post_init__(self) -> None:
        if not self.namespace or not self.name:
            raise ValueError("bundle namespace and name must not be empty")

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"
