import copy
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from fastapi import HTTPException
from pydantic import BaseModel, ValidationError as PydanticValidationError

from studio_dashboard.core.exceptions import AuthenticationRequired, ValidationError
from studio_dashboard.schemas.common.pagination import EntityId
from studio_dashboard.services.base_service import ResourceService
from studio_dashboard.services.notification.notification_service import ToastNotifier

logger = logging.getLogger(__name__)

FORM_ERROR_KEY = "form"
OnSuccess = Callable[[], Awaitable[Any]]


def set_path(data: Any, parts: List[str], value: Any) -> Any:
    """Copy of ``data`` with ``value`` stored at ``parts``, sharing untouched branches"""
    head, rest = parts[0], parts[1:]
    if isinstance(data, list):
        index = int(head)
        items = list(data)
        items[index] = set_path(items[index], rest, value) if rest else value
        return items
    data = dict(data or {})
    data[head] = set_path(data.get(head) or {}, rest, value) if rest else value
    return data


def map_validation_errors(error: PydanticValidationError) -> Dict[str, str]:
    errors = {}
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or FORM_ERROR_KEY
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


class EntityForm:
    """Add/Edit modal logic shared by every entity.

    ``data`` is the working copy the operator edits; ``submit()`` validates it
    against ``payload_schema``, POSTs or PUTs it and then awaits ``on_success``
    so the owning page can refetch.
    """

    payload_schema: Type[BaseModel]
    created_message = "Đã lưu thành công!"
    updated_message = "Cập nhật thành công!"
    failure_message = "Có lỗi xảy ra"

    def __init__(
        self,
        service: Optional[ResourceService],
        notifier: ToastNotifier,
        entity: Any = None,
        on_success: Optional[OnSuccess] = None,
    ):
        self.service = service
        self.notifier = notifier
        self.on_success = on_success
        if isinstance(entity, dict):
            self.entity_id: Optional[EntityId] = entity.get("id")
        else:
            self.entity_id = getattr(entity, "id", None)
        self.data: Dict[str, Any] = self.initial_data(entity)
        self.errors: Dict[str, str] = {}
        self.is_loading = False

    @property
    def is_edit(self) -> bool:
        return self.entity_id is not None

    def defaults(self) -> Dict[str, Any]:
        return {}

    def from_entity(self, entity: Any) -> Dict[str, Any]:
        """Working copy for an existing record, defaults fill the gaps"""
        values = entity.model_dump(mode="json") if isinstance(entity, BaseModel) else dict(entity)
        data = self.defaults()
        for key, default in data.items():
            value = values.get(key)
            if isinstance(default, dict) and isinstance(value, dict):
                data[key] = {**default, **{k: v for k, v in value.items() if v is not None}}
            elif value is not None:
                data[key] = value
        return data

    def initial_data(self, entity: Any) -> Dict[str, Any]:
        if entity is None:
            return copy.deepcopy(self.defaults())
        return self.from_entity(entity)

    def handle_change(self, field: str, value: Any):
        self.data = set_path(self.data, field.split("."), value)
        self.errors.pop(field, None)
        self.on_change(field, value)

    def on_change(self, field: str, value: Any):
        """Hook for dependent fields"""

    def apply(self, values: Dict[str, Any]):
        """Merge a submitted working copy over the current one"""
        for key, value in values.items():
            current = self.data.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                value = {**current, **value}
            self.data = {**self.data, key: value}
        self.errors = {}

    def payload_data(self) -> Dict[str, Any]:
        """What gets validated, the working copy unless a form reshapes it"""
        return self.data

    def validate(self) -> BaseModel:
        try:
            model = self.payload_schema.model_validate(self.payload_data())
        except PydanticValidationError as e:
            self.errors = map_validation_errors(e)
            first = next(iter(self.errors.values()))
            self.notifier.error(first)
            raise ValidationError(detail=first, errors=self.errors) from e
        self.errors = {}
        return model

    def to_payload(self, model: BaseModel) -> Dict[str, Any]:
        return model.model_dump(mode="json")

    async def save(self, payload: Dict[str, Any]) -> Any:
        if self.is_edit:
            return await self.service.update(self.entity_id, payload)
        return await self.service.create(payload)

    async def submit(self) -> Optional[Any]:
        """Validate and send; a second call while one is in flight is ignored"""
        if self.is_loading:
            logger.warning(f"{type(self).__name__} already submitting, ignoring")
            return None

        model = self.validate()
        self.is_loading = True
        try:
            result = await self.save(self.to_payload(model))
        except AuthenticationRequired:
            raise
        except HTTPException as e:
            logger.error(f"❌ {type(self).__name__} submit failed: {e.detail}")
            self.notifier.error(str(e.detail) or self.failure_message)
            raise
        finally:
            self.is_loading = False

        self.notifier.success(self.updated_message if self.is_edit else self.created_message)
        if self.on_success:
            await self.on_success()
        return result
