"""Signature strategies for resource descriptors.

Each strategy implements the ``SignatureStrategy`` protocol for one
``ResourceKind``: a ``build`` method that returns the kind-specific parts of
the signature or raises ``SignatureUnavailable`` when a required field is
missing.  ``compute_signature`` joins the kind tag and those parts into the
final string and turns every failure into ``None`` so that one unreadable
resource never blocks the rest of a pass.
"""

from __future__ import annotations

import abc
import hashlib
import ntpath
import os
import posixpath
import re
from typing import Any, Dict, List, Optional

from consolidator.errors import SignatureUnavailable
from consolidator.models import ResourceDescriptor, ResourceKind
from consolidator.run_config import RunConfig
from consolidator.utils.logger import log_debug

SEPARATOR = "|"

_RE_FRAME_NUMBER = re.compile(r"\d+\.")
_READ_CHUNK = 65536
# Output length in bytes for variable-length (shake) digests.
_XOF_DIGEST_LENGTH = 32

# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _require(descriptor: ResourceDescriptor, key: str) -> Any:
    value = descriptor.get(key)
    if value is None or value == "":
        raise SignatureUnavailable(descriptor.id, f"missing field '{key}'")
    return value


def format_number(value: Any) -> str:
    """Render a numeric field canonically so ``1920`` and ``1920.0`` agree."""
    if isinstance(value, bool):
        return "1" if value else "0"
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _number(descriptor: ResourceDescriptor, key: str) -> str:
    value = _require(descriptor, key)
    try:
        return format_number(value)
    except (TypeError, ValueError):
        raise SignatureUnavailable(descriptor.id, f"field '{key}' is not numeric: {value!r}")


def _flag(value: Any) -> str:
    if isinstance(value, str):
        return value.strip().lower()
    if isinstance(value, bool):
        return "on" if value else "off"
    if value is None:
        return "none"
    return format_number(value)


def _dimensions(descriptor: ResourceDescriptor) -> str:
    return f"{_number(descriptor, 'width')}x{_number(descriptor, 'height')}"


def normalize_path(path: str) -> Optional[str]:
    """Normalize an absolute POSIX or Windows path; ``None`` if relative."""
    if ntpath.splitdrive(path)[0] or path.startswith("\\\\"):
        return ntpath.normpath(path)
    if posixpath.isabs(path):
        return posixpath.normpath(path)
    return None


def is_sequence_member(path: str) -> bool:
    """True when the file name carries a frame number (``shot_0001.png``)."""
    base = ntpath.basename(path) if "\\" in path else posixpath.basename(path)
    return bool(_RE_FRAME_NUMBER.search(base))


def content_digest(path: str, algorithm: str = "sha1", max_bytes: int = 0) -> str:
    """Hash the first ``max_bytes`` of a file (whole file when 0) plus its size.

    Raises:
        OSError: if the file cannot be opened or read.
    """
    hasher = hashlib.new(algorithm)
    size = os.path.getsize(path)
    remaining = max_bytes if max_bytes > 0 else None
    with open(path, "rb") as fh:
        while remaining is None or remaining > 0:
            chunk_size = _READ_CHUNK if remaining is None else min(_READ_CHUNK, remaining)
            chunk = fh.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
            if remaining is not None:
                remaining -= len(chunk)
    if hasher.digest_size == 0:
        hexdigest = hasher.hexdigest(_XOF_DIGEST_LENGTH)
    else:
        hexdigest = hasher.hexdigest()
    return f"{algorithm}:{hexdigest}:{size}"


# ---------------------------------------------------------------------------
# Base protocol
# ---------------------------------------------------------------------------


class SignatureStrategy(abc.ABC):
    """Abstract base for kind-specific signature builders."""

    @property
    @abc.abstractmethod
    def kind(self) -> ResourceKind:
        """Resource kind handled by this strategy."""

    @abc.abstractmethod
    def build(self, descriptor: ResourceDescriptor, run_config: RunConfig) -> List[str]:
        """Return the ordered signature parts following the kind tag.

        Raises:
            SignatureUnavailable: when a required field is missing or unreadable.
        """


# ---------------------------------------------------------------------------
# File-backed footage
# ---------------------------------------------------------------------------


class FileBackedSignature(SignatureStrategy):
    """Path, geometry, timing and interpretation settings of imported footage.

    Numbered image sequences get a sequence marker.  When content hashing is
    enabled the leading bytes of the file are hashed as well, which keeps two
    different sequences apart even when all their metadata coincides.
    """

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.FILE_BACKED

    def build(self, descriptor: ResourceDescriptor, run_config: RunConfig) -> List[str]:
        raw_path = str(_require(descriptor, "path"))
        path = normalize_path(raw_path)
        if path is None:
            raise SignatureUnavailable(descriptor.id, f"path is not absolute: {raw_path}")

        parts = [
            path,
            _dimensions(descriptor),
            _number(descriptor, "duration"),
            _number(descriptor, "frame_rate"),
            f"alpha={_flag(descriptor.get('alpha_mode'))}",
            f"pulldown={_flag(descriptor.get('remove_pulldown'))}",
            f"conform={_flag(descriptor.get('conform_frame_rate'))}",
        ]

        if not descriptor.get("is_still", False) and is_sequence_member(path):
            marker = descriptor.get("missing_footage_path") or path
            parts.append(f"seq={marker}")

        if run_config.content_hash_enabled:
            try:
                digest = content_digest(
                    path,
                    algorithm=run_config.content_hash_algorithm,
                    max_bytes=run_config.content_hash_bytes,
                )
            except OSError as e:
                raise SignatureUnavailable(descriptor.id, f"unreadable file: {e}")
            parts.append(f"content={digest}")

        return parts


# ---------------------------------------------------------------------------
# Generated solids
# ---------------------------------------------------------------------------


class GeneratedSolidSignature(SignatureStrategy):
    """The three colour channels of a solid."""

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.GENERATED_SOLID

    def build(self, descriptor: ResourceDescriptor, run_config: RunConfig) -> List[str]:
        color = _require(descriptor, "color")
        if isinstance(color, (str, bytes)) or len(color) != 3:
            raise SignatureUnavailable(descriptor.id, f"color must have three channels: {color!r}")
        try:
            return [format_number(channel) for channel in color]
        except (TypeError, ValueError):
            raise SignatureUnavailable(descriptor.id, f"color is not numeric: {color!r}")


# ---------------------------------------------------------------------------
# Placeholders
# ---------------------------------------------------------------------------


class PlaceholderSignature(SignatureStrategy):
    """Declared name and dimensions of a placeholder."""

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.PLACEHOLDER

    def build(self, descriptor: ResourceDescriptor, run_config: RunConfig) -> List[str]:
        name = descriptor.get("name") or descriptor.name
        if not name:
            raise SignatureUnavailable(descriptor.id, "missing field 'name'")
        return [str(name), _dimensions(descriptor)]


def build_default_strategies() -> Dict[ResourceKind, SignatureStrategy]:
    """Map every resource kind to its signature strategy."""
    strategies = [FileBackedSignature(), GeneratedSolidSignature(), PlaceholderSignature()]
    return {s.kind: s for s in strategies}


_DEFAULT_STRATEGIES = build_default_strategies()


def build_signature(
    descriptor: ResourceDescriptor,
    run_config: Optional[RunConfig] = None,
    strategies: Optional[Dict[ResourceKind, SignatureStrategy]] = None,
) -> str:
    """Build the signature of a descriptor.

    Raises:
        SignatureUnavailable: when the descriptor cannot be fingerprinted.
    """
    rc = run_config or RunConfig()
    table = strategies if strategies is not None else _DEFAULT_STRATEGIES
    strategy = table.get(descriptor.kind)
    if strategy is None:
        raise SignatureUnavailable(descriptor.id, f"no strategy for kind '{descriptor.kind.value}'")
    parts = [descriptor.kind.value] + strategy.build(descriptor, rc)
    return SEPARATOR.join(parts)


def compute_signature(
    descriptor: ResourceDescriptor,
    run_config: Optional[RunConfig] = None,
    strategies: Optional[Dict[ResourceKind, SignatureStrategy]] = None,
) -> Optional[str]:
    """Return the descriptor's signature, or ``None`` to keep it out of dedup."""
    try:
        return build_signature(descriptor, run_config, strategies)
    except SignatureUnavailable as e:
        log_debug("Signature unavailable", resource_id=descriptor.id, reason=e.reason)
    except Exception as e:
        log_debug("Signature computation failed", resource_id=descriptor.id, error=str(e))
    return None
