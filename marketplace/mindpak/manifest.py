from __future__ import annotations

import json
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from marketplace.mindpak import VALID_NAME_REGEX, BundleID, InvalidBundleError


class HashAlgorithm(str, Enum):
    SHA256 = "sha-256"


class Metadata(BaseModel):
    """Bundle metadata, owned by the bundle file and read-only here."""

    name: str
    namespace: str
    version: str
    date: datetime | None = None

    @field_validator("name", "namespace")
    @classmethod
    def valid_name(cls, v: str) -> str:
        if not VALID_NAME_REGEX.match(v):
            raise ValueError(f"{v!r} is not a valid bundle name or namespace")
        return v

    @property
    def id(self) -> BundleID:
        return BundleID(self.namespace, self.name)


class File(BaseModel):
    name: str
    hashes: dict[HashAlgorithm, str] = Field(default_factory=dict)


class Files(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    profiles: list[File] = Field(default_factory=list)
    rule_types: list[File] = Field(default_factory=list, alias="ruleTypes")


class Manifest(BaseModel):
    metadata: Metadata
    files: Files = Field(default_factory=Files)

    @classmethod
    def read(cls, data: bytes) -> Manifest:
        """Parse the JSON manifest of a bundle."""
        try:
            return cls.model_validate(json.loads(data))
        except (ValueError, ValidationError) as e:
            raise InvalidBundleError(f"parsing manifest: {e}") from e
