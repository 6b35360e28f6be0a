"""Persistence contract the domain engines read and write through"""

from typing import Any, Dict, List, Optional, Protocol

Record = Dict[str, Any]

LOANS = "loans"
REFERRALS = "referrals"


class RecordStore(Protocol):
    """
    Narrow record store reachable by primary key and simple equality filters.

    Records are plain dicts keyed by column name. Implementations must enforce
    uniqueness constraints themselves; engines treat their own pre-checks as
    advisory only.

    Raises (all methods):
        StoreUnavailableError: I/O failure; never retried by the engines
    """

    def insert(self, collection: str, record: Record) -> Record:
        """Insert and return the stored record. Raises ConflictError on a uniqueness violation."""
        ...

    def get_one(self, collection: str, filters: Record) -> Optional[Record]:
        """First record matching all equality filters, or None"""
        ...

    def list_ordered(
        self,
        collection: str,
        filters: Record,
        order_by: str,
        descending: bool = True,
    ) -> List[Record]:
        """All records matching the filters, sorted on one column"""
        ...

    def upsert(self, collection: str, key: str, record: Record) -> Record:
        """Insert, or update the record whose `key` column matches"""
        ...
