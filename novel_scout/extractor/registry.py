# File: novel_scout/extractor/registry.py
"""
Registry mapping a site name (and the hosts it serves) to its extraction strategy.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from novel_scout.errors import UnsupportedSiteError
from novel_scout.logger import logger
from novel_scout.utils import extract_domain

__all__ = ["SiteEntry", "register", "get_extractor", "available_sites"]

_T = TypeVar("_T", bound=type)


@dataclass(frozen=True, slots=True)
class SiteEntry:
    name: str
    hosts: Tuple[str, ...]
    factory: Callable[[str], object]


_REGISTRY: Dict[str, SiteEntry] = {}


def register(name: str, *, hosts: Tuple[str, ...] = ()) -> Callable[[_T], _T]:
    """Class decorator: ``factory(site_url)`` must return an Extractor."""

    def decorator(cls: _T) -> _T:
        key = name.lower()
        if key in _REGISTRY:
            raise ValueError(f"Site {key!r} is already registered")
        _REGISTRY[key] = SiteEntry(key, tuple(h.lower() for h in hosts), cls)
        return cls

    return decorator


def available_sites() -> List[SiteEntry]:
    return sorted(_REGISTRY.values(), key=lambda e: e.name)


def _match_host(host: str) -> Optional[SiteEntry]:
    for entry in _REGISTRY.values():
        for known in entry.hosts:
            if host == known or host.endswith("." + known):
                return entry
    return None


def get_extractor(base_url: str, site: Optional[str] = None):
    """
    Return the extraction strategy for *base_url*.

    An explicit *site* name wins; otherwise the strategy is chosen by the
    URL's host. Raises UnsupportedSiteError when nothing matches.
    """
    if site is not None:
        entry = _REGISTRY.get(site.lower())
        if entry is None:
            known = ", ".join(sorted(_REGISTRY)) or "none"
            raise UnsupportedSiteError(f"Unknown site {site!r} (known: {known})")
    else:
        host = extract_domain(base_url)
        entry = _match_host(host)
        if entry is None:
            raise UnsupportedSiteError(f"No extraction strategy for host {host!r}; pass a site name explicitly")
    logger.debug("Using %s strategy for %s", entry.name, base_url)
    return entry.factory(base_url)
