"""
Module: fulfillment_kernel.selectors.paging
Responsibility: Turn a page-fetching callable into a lazy, finite,
    restartable sequence of pages.

Invariants enforced:
    - Pages are fetched strictly sequentially, one at a time, on demand.
    - Iteration stops after the first page shorter than page_size (an empty
      page included).  A full last page costs one extra, empty fetch.
    - Each call to iter() starts again from page 0.

Failure modes:
    - Whatever the fetch callable raises propagates unchanged and ends the
      iteration (StoreReadError from the stores).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 1000


class PagedReader(Generic[T]):
    """
    Iterable over the pages returned by ``fetch(page, page_size)``.

    Usage:
        reader = PagedReader(lambda p, n: store.page_read(tenant, p, n))
        for page in reader.pages():
            ...
        rows = reader.read_all()
    """

    def __init__(
        self,
        fetch: Callable[[int, int], Sequence[T]],
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._fetch = fetch
        self.page_size = page_size

    def pages(self) -> Iterator[Sequence[T]]:
        page = 0
        while True:
            batch = self._fetch(page, self.page_size)
            if batch:
                yield batch
            if len(batch) < self.page_size:
                return
            page += 1

    def __iter__(self) -> Iterator[T]:
        for batch in self.pages():
            yield from batch

    def read_all(self) -> list[T]:
        return list(self)
