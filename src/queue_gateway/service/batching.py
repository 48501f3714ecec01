"""Request chunking for SQS batch limits."""

from itertools import islice
from typing import Iterable, Iterator, List, TypeVar

T = TypeVar("T")

# SQS limit for send/delete batch entries and received messages per call
MAX_ENTRIES_PER_REQUEST = 10


def chunk(items: Iterable[T], max_size: int = MAX_ENTRIES_PER_REQUEST) -> Iterator[List[T]]:
    """Yield consecutive groups of at most max_size items, in input order."""
    if max_size < 1:
        raise ValueError(f"max_size must be >= 1, got {max_size}")

    iterator = iter(items)
    while True:
        group = list(islice(iterator, max_size))
        if not group:
            return
        yield group
