# src/pageant_vote/utils/device.py
"""Device identity helpers for the HTTP layer."""

from __future__ import annotations

from collections.abc import Mapping

from blake3 import blake3

# Proxy headers consulted in order before falling back to the socket peer.
FORWARDING_HEADERS = (
    "x-forwarded-for",
    "x-real-ip",
    "proxy-client-ip",
    "wl-proxy-client-ip",
)
_DIGEST_HEX_CHARS = 32


def client_address(headers: Mapping[str, str], peer: str | None) -> str | None:
    """Return the originating client address, honouring proxy headers.

    ``X-Forwarded-For`` may carry a chain; the first hop is the client.
    """
    for header in FORWARDING_HEADERS:
        value = headers.get(header)
        if value and value.lower() != "unknown":
            return value.split(",")[0].strip()
    return peer


def device_id_from_address(address: str | None) -> str:
    """Derive a stable device identifier from a network address.

    All browsers (including private windows) behind one address map to the
    same identifier.
    """
    source = address or "unknown"
    digest = blake3(source.encode("utf-8")).hexdigest()
    return f"ip-{digest[:_DIGEST_HEX_CHARS]}"
