"""
In-memory Column Store
======================

Process-local wide-column store with the same ordering and conflict rules as
the SQL backend. Used for tests and embedded use.
"""

import bisect
from typing import Dict, List, Optional, Tuple

from geoindex.storage.codec import Column

from .base import ColumnStore, MutationBatch


class InMemoryColumnStore(ColumnStore):
    """
    Rows of name-sorted columns kept in plain lists.

    Writing an existing column keeps whichever copy has the higher write
    time.
    """

    retry_delay = 0.0

    def __init__(self):
        # row_key -> (sorted names, name -> column)
        self._rows: Dict[bytes, Tuple[List[bytes], Dict[bytes, Column]]] = {}

    async def read(
        self,
        row_key: bytes,
        start: Optional[bytes] = None,
        limit: int = 100,
        reverse: bool = False,
    ) -> List[Column]:
        row = self._rows.get(row_key)
        if row is None or limit <= 0:
            return []
        names, columns = row

        if reverse:
            end = len(names) if start is None else bisect.bisect_right(names, start)
            selected = names[max(0, end - limit):end][::-1]
        else:
            begin = 0 if start is None else bisect.bisect_left(names, start)
            selected = names[begin:begin + limit]
        return [columns[name] for name in selected]

    async def _apply(self, batch: MutationBatch) -> None:
        for mutation in batch:
            names, columns = self._rows.setdefault(mutation.row_key, ([], {}))
            existing = columns.get(mutation.name)
            if existing is None:
                bisect.insort(names, mutation.name)
            elif existing.write_time > mutation.write_time:
                continue
            columns[mutation.name] = mutation.column

    def row_count(self) -> int:
        return len(self._rows)
