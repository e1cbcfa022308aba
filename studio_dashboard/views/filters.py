"""Predicate building blocks for the list pages.

A predicate is a plain ``item -> bool`` callable. Field paths may be dotted
(``employee.name``) and work on pydantic models as well as dicts.
"""
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Literal, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

T = TypeVar("T")
Predicate = Callable[[Any], bool]

UNSET_VALUES = ("", "all", None)
ActiveStatus = Literal["active", "inactive"]
ACTIVE_STATUS_PATTERN = "^(active|inactive|all)?$"


def get_field(item: Any, path: str) -> Any:
    value = item
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def text_search(term: str, fields: Sequence[str]) -> Predicate:
    """Case-insensitive substring match on any of ``fields``"""
    needle = term.strip().lower()

    def predicate(item: Any) -> bool:
        for path in fields:
            value = _plain(get_field(item, path))
            if value is not None and needle in str(value).lower():
                return True
        return False

    return predicate


def equals(field: str, expected: Any) -> Predicate:
    expected = _plain(expected)

    def predicate(item: Any) -> bool:
        return _plain(get_field(item, field)) == expected

    return predicate


def _as_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def numeric_range(field: str, minimum: Optional[Any] = None, maximum: Optional[Any] = None) -> Predicate:
    """Inclusive bounds, a missing bound is open"""
    low, high = _as_decimal(minimum), _as_decimal(maximum)

    def predicate(item: Any) -> bool:
        value = _as_decimal(get_field(item, field))
        if value is None:
            return False
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
        return True

    return predicate


def active_status(status: ActiveStatus, field: str = "is_active") -> Predicate:
    wanted = status == "active"

    def predicate(item: Any) -> bool:
        return bool(get_field(item, field)) is wanted

    return predicate


def compose(*predicates: Predicate) -> Predicate:
    def predicate(item: Any) -> bool:
        return all(p(item) for p in predicates)

    return predicate


def apply_filters(items: Iterable[T], predicates: Sequence[Predicate]) -> List[T]:
    if not predicates:
        return list(items)
    combined = compose(*predicates)
    return [item for item in items if combined(item)]


class FilterSet(BaseModel):
    """Filter values of one page, bound to query parameters.

    "all" and empty strings mean the filter is not set.
    """

    model_config = ConfigDict(frozen=True)

    # Filters the backend applies itself
    server_fields: ClassVar[Sequence[str]] = ()

    @field_validator("*", mode="before")
    def normalize_unset(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return None if v in UNSET_VALUES else v

    def active_values(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if v is not None}

    def active_count(self) -> int:
        return len(self.active_values())

    def server_params(self) -> Dict[str, Any]:
        return {k: _plain(v) for k, v in self.active_values().items() if k in self.server_fields}

    def predicates(self) -> List[Predicate]:
        return []


class ProjectFilters(FilterSet):
    search: Optional[str] = None
    status: Optional[str] = None

    def predicates(self) -> List[Predicate]:
        preds = []
        if self.search:
            preds.append(text_search(self.search, ("customer_name", "customer_phone", "project_code")))
        if self.status:
            preds.append(equals("status", self.status))
        return preds


class EmployeeFilters(FilterSet):
    search: Optional[str] = None
    role: Optional[str] = None
    status: Optional[ActiveStatus] = None

    def predicates(self) -> List[Predicate]:
        preds = []
        if self.search:
            preds.append(text_search(self.search, ("name", "email", "phone", "role")))
        if self.role:
            preds.append(equals("role", self.role))
        if self.status:
            preds.append(active_status(self.status))
        return preds


class PackageFilters(FilterSet):
    search: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    status: Optional[ActiveStatus] = None

    def predicates(self) -> List[Predicate]:
        preds = []
        if self.search:
            preds.append(text_search(self.search, ("name", "description")))
        if self.category:
            preds.append(equals("category", self.category))
        if self.min_price is not None or self.max_price is not None:
            preds.append(numeric_range("price", self.min_price, self.max_price))
        if self.status:
            preds.append(active_status(self.status))
        return preds


class PartnerFilters(FilterSet):
    server_fields: ClassVar[Sequence[str]] = ("search",)

    search: Optional[str] = None
    type: Optional[str] = None

    def predicates(self) -> List[Predicate]:
        if self.type:
            return [equals("type", self.type)]
        return []


class SalaryFilters(FilterSet):
    server_fields: ClassVar[Sequence[str]] = ("month", "status")

    month: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None

    def predicates(self) -> List[Predicate]:
        if self.search:
            return [text_search(self.search, ("employee.name",))]
        return []


class TransactionFilters(FilterSet):
    server_fields: ClassVar[Sequence[str]] = ("type",)

    type: Optional[str] = None
    category: Optional[str] = None

    def predicates(self) -> List[Predicate]:
        preds = []
        if self.type:
            preds.append(equals("type", self.type))
        if self.category:
            preds.append(equals("category", self.category))
        return preds
