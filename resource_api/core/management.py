"""Capability contracts implemented by every resource manager.

A route only ever talks to a ``Manageable``; swapping the concrete manager
(another resource, another backend) does not touch the transport code.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Generic, Iterator, Optional, Tuple, TypeVar

BackendT = TypeVar("BackendT")
IdT = TypeVar("IdT")
DataT = TypeVar("DataT")
SearchT = TypeVar("SearchT")
ResultT = TypeVar("ResultT")
ItemT = TypeVar("ItemT")

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 25


class Manageable(ABC, Generic[BackendT, IdT, DataT, SearchT, ResultT]):
    """CRUD over a backend.

    Every operation receives the backend handle (connection, session or
    transaction) explicitly, so the same manager runs in whatever
    transaction scope the caller opened. Failures are raised as
    ``resource_api.core.errors.CoreError`` subclasses.
    """

    @abstractmethod
    async def create(self, data: DataT, backend: BackendT) -> DataT:
        """Persist a new record; the backend assigns the identifier."""

    @abstractmethod
    async def read(self, search: SearchT, backend: BackendT) -> ResultT:
        """Return the page of records matching ``search``.

        No match is not an error: the result has zero pages and no items.
        """

    @abstractmethod
    async def update(self, id: IdT, data: DataT, backend: BackendT) -> DataT:
        """Replace the mutable fields of record ``id``."""

    @abstractmethod
    async def delete(self, id: IdT, backend: BackendT) -> None:
        """Remove record ``id``."""


class Searchable(ABC):
    """Normalized query parameters extracted from a request"""

    @abstractmethod
    def get_id(self) -> Optional[Any]:
        """Exact identifier filter, as a displayable token"""

    @abstractmethod
    def get_pattern(self) -> Optional[str]:
        """Value matched against the searchable fields"""

    @abstractmethod
    def get_date_range(self) -> Optional[Tuple[datetime, datetime]]:
        """Inclusive bounds, only when both are present"""

    @abstractmethod
    def get_page(self) -> int:
        """1-based page number, DEFAULT_PAGE when absent or non-positive"""

    @abstractmethod
    def get_per_page(self) -> int:
        """Page size, DEFAULT_PER_PAGE when absent or non-positive"""


class SearchResult(ABC, Generic[ItemT]):
    """One page of a search"""

    @property
    @abstractmethod
    def num_pages(self) -> int:
        ...

    @abstractmethod
    def results(self) -> Iterator[ItemT]:
        """Single-pass iterator over the page items"""


def count_pages(total: int, per_page: int) -> int:
    """Ceiling division of ``total`` by ``per_page``"""
    if total <= 0:
        return 0
    return -(-total // per_page)
