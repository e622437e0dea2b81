"""Candidate representations of a scraped URL.

The backend may hold a post under the full URL, the URL with or without a trailing
slash, or only its path. Lookups therefore probe every representation instead of
forcing one canonical form on the caller.
"""

from __future__ import annotations

from urllib.parse import urlsplit


def url_variants(url: str) -> tuple[str, ...]:
    """Return the lookup candidates for ``url`` in probing order.

    Order: the URL unchanged, without and with a trailing slash, then the path
    component and the path with the opposite trailing-slash form. Path variants are
    only produced for absolute URLs; anything unparsable yields the string-level
    variants alone. Never raises.
    """

    if not url:
        return ()
    variants: dict[str, None] = {}

    def add(candidate: str) -> None:
        if candidate:
            variants.setdefault(candidate, None)

    add(url)
    add(url[:-1] if url.endswith("/") else url)
    add(url if url.endswith("/") else f"{url}/")

    path = _path_component(url)
    if path is not None:
        add(path)
        add(path[:-1] if path.endswith("/") else f"{path}/")

    return tuple(variants)


def canonical_path(url: str) -> str:
    """Strip scheme and host, forcing a leading and a trailing slash.

    This is the form the backend's URL repair job stores posts under.
    """

    path = _path_component(url)
    clean = path if path is not None else url.strip()
    if not clean.startswith("/"):
        clean = f"/{clean}"
    if not clean.endswith("/"):
        clean = f"{clean}/"
    return clean


def _path_component(url: str) -> str | None:
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return parts.path or "/"
