"""Helpers for turning file URLs into storage keys."""

from __future__ import annotations

LEGACY_HOST = "api.ikat.id"
CURRENT_HOST = "ikat.id"


def extract_key(value: str) -> str:
    """Return the bare storage key from a key or a full file URL.

    Everything after the last ``/`` is the key; a value without ``/`` is
    returned unchanged.  ``"a/b/"`` yields ``""`` and is left for the
    remote service to reject.
    """
    _, sep, tail = value.rpartition("/")
    return tail if sep else value


def migrate_url(url: str) -> str:
    """Rewrite the legacy host (``api.ikat.id``) in *url* to the current host.

    Only the first occurrence is replaced, so paths are left intact.
    """
    return url.replace(LEGACY_HOST, CURRENT_HOST, 1)
