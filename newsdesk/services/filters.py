"""
Translate article query parameters into Firestore filters.

Firestore has no substring operator, and ``array_contains_any`` skips
articles whose tags are stored as a single string, so the title search and
the tag match are returned as a predicate applied to the documents the
store query yields.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple

from newsdesk.models.article import ArticleStatus

Filter = Tuple[str, str, Any]


def split_tags(value) -> List[str]:
    """Normalize a comma separated string or a list of tags.

    Returns stripped, non-empty tags with duplicates removed, in first-seen
    order.
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    else:
        parts = []
        for item in value:
            if isinstance(item, str):
                parts.extend(item.split(","))
            elif item is not None:
                parts.append(str(item))
    return list(dict.fromkeys(tag for tag in (part.strip() for part in parts) if tag))


def _items(value) -> list:
    return list(value) if isinstance(value, (list, tuple, set)) else [value]


def flatten_unique(values: Iterable[Any]) -> List[Any]:
    """Flatten scalars and lists into one list of distinct truthy values"""
    out = []
    seen = set()
    for value in values:
        for item in _items(value):
            if not item or item in seen:
                continue
            seen.add(item)
            out.append(item)
    return out


@dataclass
class ArticleQuery:
    filters: List[Filter] = field(default_factory=list)
    search: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def matches(self, doc: dict) -> bool:
        if self.search:
            title = doc.get("title") or ""
            if self.search.lower() not in str(title).lower():
                return False
        if self.tags:
            stored = doc.get("tags")
            if stored is None or not set(self.tags) & set(_items(stored)):
                return False
        return True

    def apply(self, docs: List[Tuple[str, dict]]) -> List[Tuple[str, dict]]:
        return [(doc_id, data) for doc_id, data in docs if self.matches(data)]


def build_article_query(
    search: Optional[str] = None,
    publisher: Optional[str] = None,
    tags: Optional[str] = None,
) -> ArticleQuery:
    """Build the public article listing query.

    Only approved articles are ever listed. ``tags`` matches articles having
    any of the given tags, whether stored as a list or as a single string.
    """
    query = ArticleQuery(filters=[("status", "==", ArticleStatus.APPROVED.value)])

    if search and search.strip():
        query.search = search.strip()

    if publisher and publisher.strip():
        query.filters.append(("publisher", "==", publisher.strip()))

    query.tags = split_tags(tags)
    return query
