"""
Hydration
=========

Turns entity references into search results at a requested level. Loading
full domain objects belongs to the host application; it plugs in through
the EntityLoader protocol.
"""

from typing import List, Protocol, Sequence

from .models import EntityRef, ResultLevel, SearchResults


class EntityLoader(Protocol):
    """Loads entities for a list of references."""

    async def load_entities(
        self,
        refs: Sequence[EntityRef],
        level: ResultLevel,
        limit: int,
    ) -> SearchResults:
        ...


class RefListLoader:
    """Returns the references themselves, without entity bodies."""

    async def load_entities(
        self,
        refs: Sequence[EntityRef],
        level: ResultLevel,
        limit: int,
    ) -> SearchResults:
        selected: List[EntityRef] = list(refs)[:limit] if limit > 0 else list(refs)
        return SearchResults(refs=selected, level=level)
