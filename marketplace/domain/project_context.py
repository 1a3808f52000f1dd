from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID


@dataclass(frozen=True, slots=True)
class ProjectContext:
    """The project an operation acts on.

    ``provider`` is handed through untouched to the rule type and profile
    services, which need it to link the records they create.
    """

    id: UUID
    provider: Any
