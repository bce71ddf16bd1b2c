"""Immutable per-pass configuration.

``RunConfig`` captures the settings one consolidation pass needs.  It is
built once before a pass and handed to the ``Consolidator`` so that the
engine never reads the global singleton or ``os.environ`` mid-pass, and two
passes with different settings can run side by side.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from consolidator.config import Config


def new_pass_id() -> str:
    """Return a short random identifier for a consolidation pass."""
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class RunConfig:
    """Immutable, per-pass configuration."""

    # --- Signatures ---------------------------------------------------------
    content_hash_enabled: bool = True
    content_hash_bytes: int = 1048576
    content_hash_algorithm: str = "sha1"

    # --- Pass behaviour -----------------------------------------------------
    remove_duplicates: bool = True
    dry_run: bool = False

    # --- Identity -----------------------------------------------------------
    pass_id: str = field(default_factory=new_pass_id)

    @classmethod
    def from_config(cls, config: Config, **overrides: Any) -> RunConfig:
        """Build a ``RunConfig`` from the current global ``Config``.

        Keyword overrides (e.g. from CLI flags) win over the config values.
        """
        rc = cls(
            content_hash_enabled=config.content_hash_enabled,
            content_hash_bytes=config.content_hash_bytes,
            content_hash_algorithm=config.content_hash_algorithm,
            remove_duplicates=config.remove_duplicates,
            dry_run=config.dry_run,
        )
        return replace(rc, **overrides) if overrides else rc
