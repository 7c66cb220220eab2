"""
Process-wide caches used by the document renderer and diagnostics.

Each cache holds one immutable entry and is refreshed by swapping the whole
reference, so concurrent readers see either the old or the new value.
"""
import logging
import time
from typing import Any, NamedTuple, Optional

logger = logging.getLogger(__name__)


class CacheEntry(NamedTuple):
    value: Any
    expires_at: float


class TtlCache:
    """Single-value cache that reloads once ``ttl`` seconds have passed."""

    def __init__(self, ttl, clock=time.monotonic, name='cache'):
        self.ttl = ttl
        self.clock = clock
        self.name = name
        self._entry: Optional[CacheEntry] = None

    def get_or_refresh(self, loader):
        entry = self._entry
        now = self.clock()
        if entry is not None and now < entry.expires_at:
            return entry.value
        value = loader()
        self._entry = CacheEntry(value, now + self.ttl)
        logger.debug("Refreshed %s (ttl=%ss)", self.name, self.ttl)
        return value

    def clear(self):
        self._entry = None


class TemplateCache:
    """
    The document template, read once from disk. A failed read is not
    cached so the next request tries again.
    """

    def __init__(self, path):
        self.path = path
        self._html: Optional[str] = None

    def load(self) -> Optional[str]:
        html = self._html
        if html is not None:
            return html
        try:
            with open(self.path, encoding='utf-8') as fh:
                html = fh.read()
        except OSError:
            logger.exception("Unable to read document template at %s", self.path)
            return None
        self._html = html
        logger.info("Loaded document template from %s", self.path)
        return html
