"""Decide whether the platform behind a gateway can take anchored comments."""

from __future__ import annotations

import functools
import logging
import re

from revsync_core.errors import GatewayError

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^\s*v?(\d+(?:\.\d+)*)")


def parse_version(version: str) -> tuple[int, ...]:
    """Leading dotted numeric part of a version string: "2.1.1rc1" -> (2, 1, 1)."""
    match = _VERSION_RE.match(version)
    if not match:
        raise ValueError(f"Unparsable version: {version!r}")
    parts = [int(p) for p in match.group(1).split(".")]
    while len(parts) < 3:
        parts.append(0)
    return tuple(parts)


@functools.lru_cache(maxsize=None)
def supports_inline_comments(version: str | None, minimum: str) -> bool:
    """True when ``version`` is known and at least ``minimum``."""
    if not version:
        return False
    try:
        return parse_version(version) >= parse_version(minimum)
    except ValueError:
        logger.debug("Could not compare version %r against %r", version, minimum)
        return False


def detect_inline_support(gateway) -> bool:
    """Ask the gateway for its version once; any failure means no inline support."""
    try:
        version = gateway.platform_version()
    except GatewayError as e:
        logger.debug("Version lookup failed, assuming no inline comments: %s", e)
        return False
    supported = supports_inline_comments(version, gateway.min_inline_version)
    logger.debug("Platform version %s, inline comments supported: %s", version, supported)
    return supported
