import logging
from collections import Counter
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from fastapi import HTTPException

from studio_dashboard.services.base_service import ResourceService
from studio_dashboard.views.filters import FilterSet, apply_filters, get_field

logger = logging.getLogger(__name__)

T = TypeVar("T")
F = TypeVar("F", bound=FilterSet)


def count_by(items: Iterable[Any], field: str) -> Dict[str, int]:
    counter = Counter()
    for item in items:
        value = get_field(item, field)
        counter[str(getattr(value, "value", value))] += 1
    return dict(counter)


class ListView(Generic[T, F]):
    """Whole-collection list with in-memory filtering.

    Every ``refresh()`` takes a new generation number; a response that comes
    back after a newer refresh started is dropped.
    """

    def __init__(self, service: ResourceService, filters: F):
        self.service = service
        self.filters: F = filters
        self.items: List[T] = []
        self.version = 0
        self.is_loading = False
        self.error: Optional[str] = None
        self._generation = 0
        self._filtered_key: Optional[Tuple[int, F]] = None
        self._filtered: List[T] = []

    @property
    def generation(self) -> int:
        return self._generation

    async def _fetch(self, params: Dict[str, Any]) -> Tuple[List[T], bool]:
        """Fetch the collection; the shared state only takes it while no newer fetch started"""
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        try:
            items = await self.service.list(params)
        except HTTPException as e:
            if generation == self._generation:
                self.is_loading = False
                self.error = str(e.detail)
            raise

        if generation != self._generation:
            logger.debug(f"Discarding stale {self.service.endpoint} response (generation {generation})")
            return items, False

        self.items = items
        self.version += 1
        self.is_loading = False
        self.error = None
        return items, True

    async def refresh(self) -> bool:
        """Refetch the collection, returns False when the response was stale"""
        _, current = await self._fetch(self.filters.server_params())
        return current

    async def query(self, filters: F) -> Tuple[List[T], List[T]]:
        """Apply ``filters``, refetch and return (items, filtered) of this fetch.

        A caller superseded by a newer query still gets its own rows, only the
        shared state is left to the newer one.
        """
        self.filters = filters
        items, _ = await self._fetch(filters.server_params())
        return items, apply_filters(items, filters.predicates())

    @property
    def filtered(self) -> List[T]:
        key = (self.version, self.filters)
        if key != self._filtered_key:
            self._filtered = apply_filters(self.items, self.filters.predicates())
            self._filtered_key = key
        return self._filtered

    def set_filters(self, **changes: Any) -> bool:
        """Update filter values, returns True when the backend query changed"""
        before = self.filters.server_params()
        values = {**self.filters.model_dump(), **changes}
        self.filters = type(self.filters).model_validate(values)
        return self.filters.server_params() != before

    def clear_filters(self) -> bool:
        before = self.filters.server_params()
        self.filters = type(self.filters)()
        return self.filters.server_params() != before

    def count_by(self, field: str) -> Dict[str, int]:
        return count_by(self.items, field)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "total": len(self.items),
            "count": len(self.filtered),
            "active_filters": self.filters.active_count(),
            "items": self.filtered,
        }
