"""
Tag Container
=============

A key -> tag-list container queried with match rules.

Key Design Principles:
1. Entries are a plain, exposed dict; the host inserts and removes freely
2. Queries are generators: no result buffer, no work beyond what is pulled
3. Query sequences only read the container; mutating it while a sequence
   is alive is the host's error (adding or removing a key raises
   RuntimeError in either key order)
4. No tag index: every query is a linear scan
"""

import logging
from typing import Generic, Hashable, Iterable, Iterator, Optional, TypeVar

from tagmap.config import KeyOrder, TagMapSettings
from tagmap.core.matcher import tags_satisfy
from tagmap.core.schema import MatchRule


logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
TAG = TypeVar("TAG")


class TagMap(Generic[K, TAG]):
    """
    A container that allows item lookup based on tag matching.

    Example
    -------
    >>> documents = TagMap()
    >>> documents.insert("q3-report", ["finance", "draft", "internal"])
    >>> documents.insert("q2-report", ["finance", "internal"])
    >>> list(documents.matching(Rules([Tags(["finance"]), NotTags(["draft"])])))
    ['q2-report']
    """

    def __init__(
        self,
        entries: Optional[dict[K, list[TAG]]] = None,
        *,
        key_order: Optional[KeyOrder | str] = None,
        settings: Optional[TagMapSettings] = None,
    ):
        """
        Initialize the container.

        Parameters
        ----------
        entries : dict, optional
            Initial key -> tags mapping. Used as the backing dict directly.
        key_order : KeyOrder or str, optional
            Query walk order. Overrides `settings.key_order`.
        settings : TagMapSettings, optional
            Defaults for anything not given explicitly.
        """
        settings = settings or TagMapSettings()
        self.entries: dict[K, list[TAG]] = entries if entries is not None else {}
        self.key_order = KeyOrder(key_order) if key_order is not None else settings.key_order

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __iter__(self) -> Iterator[K]:
        for key, _ in self._walk():
            yield key

    def __repr__(self) -> str:
        return f"TagMap(entries={len(self.entries)}, key_order={self.key_order.value})"

    # =========================================================================
    # Host-side mutation
    # =========================================================================

    def insert(self, key: K, tags: Iterable[TAG]) -> None:
        """Store a copy of `tags` for `key`, replacing any previous tags."""
        if isinstance(tags, (str, bytes)):
            raise TypeError("tags must be an iterable of tags, not a single string")
        try:
            stored = list(tags)
        except TypeError as exc:
            raise TypeError(f"tags for {key!r} must be iterable") from exc
        self.entries[key] = stored

    def remove(self, key: K) -> Optional[list[TAG]]:
        """Remove `key` and return its tags, or None if it was not stored."""
        return self.entries.pop(key, None)

    def tags_of(self, key: K) -> list[TAG]:
        """Return the tag list stored for `key`. Raises KeyError if absent."""
        return self.entries[key]

    # =========================================================================
    # Queries
    # =========================================================================

    def matching(self, rule: MatchRule) -> Iterator[K]:
        """
        Yield the keys whose tags satisfy `rule`.

        The sequence is lazy and single-pass; call again for a fresh one.
        """
        for key, _ in self.matching_entries(rule):
            yield key

    def matching_entries(self, rule: MatchRule) -> Iterator[tuple[K, list[TAG]]]:
        """
        Yield ``(key, tags)`` for every entry whose tags satisfy `rule`.

        `tags` is the list stored in the container, not a copy.
        """
        logger.debug("Matching %r over %d entries", rule, len(self.entries))
        visited = 0
        matched = 0
        for key, tags in self._walk():
            visited += 1
            if tags_satisfy(tags, rule):
                matched += 1
                yield key, tags
        logger.debug("Match exhausted: visited=%d matched=%d", visited, matched)

    def count_matching(self, rule: MatchRule) -> int:
        """Count matching entries without collecting them."""
        return sum(1 for _ in self.matching(rule))

    def first_matching(self, rule: MatchRule, default: Optional[K] = None) -> Optional[K]:
        """Return the first matching key in walk order, or `default`."""
        return next(self.matching(rule), default)

    def collect_matching(self, rule: MatchRule) -> list[K]:
        """Eagerly collect matching keys into a list."""
        return list(self.matching(rule))

    def _walk(self) -> Iterator[tuple[K, list[TAG]]]:
        """Iterate entries in the configured key order."""
        if self.key_order == KeyOrder.SORTED:
            entries = self.entries
            size = len(entries)
            for key in sorted(entries):
                if len(entries) != size:
                    raise RuntimeError("dictionary changed size during iteration")
                yield key, entries[key]
        else:
            yield from self.entries.items()


def build_tag_map(
    items: Iterable[tuple[K, Iterable[TAG]]],
    *,
    key_order: Optional[KeyOrder | str] = None,
    settings: Optional[TagMapSettings] = None,
) -> TagMap[K, TAG]:
    """Build a container from ``(key, tags)`` pairs; later pairs replace earlier ones."""
    tag_map: TagMap[K, TAG] = TagMap(key_order=key_order, settings=settings)
    for key, tags in items:
        tag_map.insert(key, tags)
    return tag_map
