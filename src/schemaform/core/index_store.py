"""State container for the active index of every oneOf site in a form."""

import logging
from typing import Dict, Iterable, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# (data path, schema path) identifies one oneOf occurrence in a rendered form
SiteKey = Tuple[Tuple[Union[str, int], ...], str]


class ActiveIndexStore:
    """Maps oneOf site keys to their currently selected alternative.

    Indices live here rather than in the form data so the data stays
    serialization-clean. Each site owns its own entry, including nested ones.
    """

    def __init__(self):
        self._indices: Dict[SiteKey, int] = {}

    def get(self, site: SiteKey) -> Optional[int]:
        """Return the stored index for a site, or None if never rendered."""
        return self._indices.get(site)

    def set(self, site: SiteKey, index: int) -> None:
        """Store the index for a site."""
        previous = self._indices.get(site)
        self._indices[site] = index
        if previous != index:
            logger.debug("Active index for %s: %s -> %s", format_site(site), previous, index)

    def prune(self, live_sites: Iterable[SiteKey]) -> None:
        """Drop sites that were not rendered in the latest pass."""
        live = set(live_sites)
        for site in [s for s in self._indices if s not in live]:
            logger.debug("Dropping state for vanished oneOf site %s", format_site(site))
            del self._indices[site]

    def clear(self) -> None:
        """Forget every site (form unmounted)."""
        self._indices.clear()

    def snapshot(self) -> Dict[SiteKey, int]:
        """Copy of the current indices, for inspection."""
        return dict(self._indices)

    def __contains__(self, site: SiteKey) -> bool:
        return site in self._indices

    def __len__(self) -> int:
        return len(self._indices)


def format_site(site: SiteKey) -> str:
    """Readable form of a site key, e.g. ``userId@#/properties/userId/oneOf``."""
    data_path, schema_path = site
    return "/".join(str(p) for p in data_path) + "@" + schema_path
