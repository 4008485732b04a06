"""Directory listing container."""

from typing import Callable, Iterable, Iterator, List

from common.attributes import StorageAttributes


class DirectoryListing:
    """Iterable over the attributes returned by a listing call."""

    def __init__(self, listing: Iterable[StorageAttributes]):
        self._listing = listing

    def __iter__(self) -> Iterator[StorageAttributes]:
        return iter(self._listing)

    def filter(self, predicate: Callable[[StorageAttributes], bool]) -> 'DirectoryListing':
        return DirectoryListing(item for item in self._listing if predicate(item))

    def map(self, mapper: Callable[[StorageAttributes], object]) -> Iterator[object]:
        return (mapper(item) for item in self._listing)

    def sort_by_path(self) -> 'DirectoryListing':
        return DirectoryListing(sorted(self._listing, key=lambda item: item.path))

    def to_list(self) -> List[StorageAttributes]:
        return list(self._listing)
