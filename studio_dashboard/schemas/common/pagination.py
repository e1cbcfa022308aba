from decimal import Decimal
from typing import Annotated, Any, Dict, Generic, List, TypeVar, Union
from pydantic import BaseModel, PlainSerializer

T = TypeVar("T")


def money_to_number(value: Decimal) -> Union[int, float]:
    # The backend expects plain JSON numbers, VND amounts are whole
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Money = Annotated[Decimal, PlainSerializer(money_to_number, return_type=Union[int, float], when_used="json")]

EntityId = Union[int, str]


class ListPageResponse(BaseModel, Generic[T]):
    total: int
    count: int
    active_filters: int = 0
    stats: Dict[str, Any] = {}
    items: List[T]


def unwrap_collection(data: Any) -> List[Any]:
    """Return the records of a collection response.

    The backend answers with ``{"total": n, "items": [...]}`` for most
    resources, ``{"results": [...]}`` for salaries, and occasionally a bare list.
    """
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("items", "results", "data"):
            value = data.get(key)
            if isinstance(value, list):
                return value
    return []
