from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from src.domain.models.cow import Cow


class HerdStore(Protocol):
    """Whole-collection record store; no partial updates."""

    async def load(self) -> list[Cow]: ...

    # Must be all-or-nothing; raise InfrastructureError on failure.
    async def save(self, cows: Sequence[Cow]) -> None: ...
