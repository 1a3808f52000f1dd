from __future__ import annotations

import hashlib
import logging
import tarfile
from pathlib import Path, PurePosixPath
from typing import Callable, Mapping, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from marketplace.mindpak import (
    MANIFEST_FILE_NAME,
    PATH_PROFILES,
    PATH_RULE_TYPES,
    BundleID,
    InvalidBundleError,
    ProfileNotFoundError,
)
from marketplace.mindpak.manifest import File, Files, HashAlgorithm, Manifest, Metadata
from marketplace.mindpak.reader import BundleReader
from marketplace.schemas.profile import ProfileDefinition
from marketplace.schemas.rule_type import RuleTypeDefinition

logger = logging.getLogger(__name__)

_Model = TypeVar("_Model", bound=BaseModel)


class Bundle(BundleReader):
    """A bundle held fully in memory, keyed by archive-relative path."""

    def __init__(self, contents: Mapping[str, bytes]):
        self._contents = dict(contents)
        self.files = Files()
        self.manifest = self._read_source()

    @classmethod
    def from_tar_gz(cls, path: str | Path) -> Bundle:
        """Load a bundle from a ``.tar.gz`` file. Only regular files are kept."""
        contents: dict[str, bytes] = {}
        try:
            with tarfile.open(path, "r:gz") as tar:
                for member in tar:
                    # Nothing but regular files matters; never follow relative paths
                    if ".." in PurePosixPath(member.name).parts or not member.isreg():
                        continue
                    extracted = tar.extractfile(member)
                    if extracted is None:
                        continue
                    contents[_clean_path(member.name)] = extracted.read()
        except (OSError, tarfile.TarError) as e:
            raise InvalidBundleError(f"error while opening {path}: {e}") from e

        return cls(contents)

    @classmethod
    def from_directory(cls, path: str | Path) -> Bundle:
        """Load an unpacked bundle from a directory."""
        root = Path(path)
        if not root.is_dir():
            raise InvalidBundleError(f"specified path is not a directory: {root}")

        contents = {
            p.relative_to(root).as_posix(): p.read_bytes()
            for p in sorted(root.rglob("*"))
            if p.is_file()
        }
        return cls(contents)

    @property
    def id(self) -> BundleID:
        return self.manifest.metadata.id

    def get_metadata(self) -> Metadata:
        return self.manifest.metadata

    def get_profile(self, name: str) -> ProfileDefinition:
        candidates = [name]
        if not name.endswith((".yaml", ".yml")):
            candidates.append(f"{name}.yaml")

        for candidate in candidates:
            path = f"{PATH_PROFILES}/{candidate}"
            if path in self._contents:
                return self._load(path, ProfileDefinition)

        raise ProfileNotFoundError(f"profile {name} not found in bundle {self.id}")

    def for_each_rule_type(self, visit: Callable[[RuleTypeDefinition], None]) -> None:
        prefix = f"{PATH_RULE_TYPES}/"
        for path in sorted(p for p in self._contents if p.startswith(prefix)):
            visit(self._load(path, RuleTypeDefinition))

    def verify(self) -> None:
        """
        Check the files listed in the manifest against the bundle contents.

        Files the manifest does not list are not checked.

        Raises:
            InvalidBundleError: If a listed file is missing or its hash differs
        """
        listed = [(PATH_PROFILES, f) for f in self.manifest.files.profiles] + [
            (PATH_RULE_TYPES, f) for f in self.manifest.files.rule_types
        ]
        for directory, entry in listed:
            path = f"{directory}/{entry.name}"
            data = self._contents.get(path)
            if data is None:
                raise InvalidBundleError(f"file {path} listed in manifest is missing")
            expected = entry.hashes.get(HashAlgorithm.SHA256)
            if expected and expected != hashlib.sha256(data).hexdigest():
                raise InvalidBundleError(f"hash mismatch for {path}")

    def _read_source(self) -> Manifest:
        manifest = None
        for path, data in sorted(self._contents.items()):
            if path == MANIFEST_FILE_NAME:
                manifest = Manifest.read(data)
                continue

            entry = File(
                name=path.rsplit("/", 1)[-1],
                hashes={HashAlgorithm.SHA256: hashlib.sha256(data).hexdigest()},
            )
            if path.startswith(f"{PATH_PROFILES}/"):
                self.files.profiles.append(entry)
            elif path.startswith(f"{PATH_RULE_TYPES}/"):
                self.files.rule_types.append(entry)
            else:
                raise InvalidBundleError(f"found unexpected entry in mindpak source: {path!r}")

        if manifest is None:
            raise InvalidBundleError(f"bundle has no {MANIFEST_FILE_NAME}")

        logger.debug(
            "Read bundle %s (%d profiles, %d rule types)",
            manifest.metadata.id,
            len(self.files.profiles),
            len(self.files.rule_types),
        )
        return manifest

    def _load(self, path: str, model: type[_Model]) -> _Model:
        try:
            data = yaml.safe_load(self._contents[path])
        except yaml.YAMLError as e:
            raise InvalidBundleError(f"invalid YAML in {path}: {e}") from e

        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise InvalidBundleError(f"invalid content in {path}:\n{e}") from e


def _clean_path(name: str) -> str:
    while name.startswith("./"):
        name = name[2:]
    return name.lstrip("/")
