from typing import Any, Dict


def join_url(base: str, name: str) -> str:
    """
    Append ``name`` to ``base`` with exactly one separating slash.
    """
    return f"{base.rstrip('/')}/{name.lstrip('/')}"


def add_provider_urls(entry: Dict[str, Any], web_root: str) -> Dict[str, Any]:
    """
    Give every provider of a serialised CatalogEntry an absolute ``url``.

    Provider files are resolved against the document root, so ``web_root``
    must be the scheme/host root of the request (``http://host:port/``).
    The dict is modified in place and returned for convenience; callers
    pass a fresh serialisation, never the cached catalog.
    """
    for version in entry.get("versions", []):
        for provider in version.get("providers") or []:
            provider["url"] = f"{web_root}{provider['file']}"
    return entry
