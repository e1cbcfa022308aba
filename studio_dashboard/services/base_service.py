import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from studio_dashboard.client.http_client import ApiClient
from studio_dashboard.core.exceptions import BackendError
from studio_dashboard.schemas.common.pagination import EntityId, unwrap_collection

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ResourceService(Generic[ModelT]):
    """REST access to one backend collection.

    Collections live at ``/<endpoint>/`` and records at ``/<endpoint>/<id>``.
    """

    endpoint: str = ""
    model: Type[ModelT]

    def __init__(self, api: ApiClient):
        self.api = api

    @property
    def collection_path(self) -> str:
        return f"/{self.endpoint}/"

    def item_path(self, entity_id: EntityId) -> str:
        return f"/{self.endpoint}/{entity_id}"

    def _to_model(self, data: Any) -> ModelT:
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"❌ Unexpected {self.endpoint} record from backend: {e}")
            raise BackendError(status_code=502, detail=f"Invalid {self.endpoint} record from server") from e

    def _to_models(self, data: Any) -> List[ModelT]:
        items = []
        for raw in unwrap_collection(data):
            try:
                items.append(self.model.model_validate(raw))
            except PydanticValidationError as e:
                logger.warning(f"⚠️ Skipping malformed {self.endpoint} record: {e.error_count()} errors")
        return items

    async def list(self, params: Optional[Dict[str, Any]] = None) -> List[ModelT]:
        data = await self.api.get(self.collection_path, params=params)
        items = self._to_models(data)
        logger.debug(f"Fetched {len(items)} {self.endpoint}")
        return items

    async def get(self, entity_id: EntityId) -> ModelT:
        data = await self.api.get(self.item_path(entity_id))
        return self._to_model(data)

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = await self.api.post(self.collection_path, payload)
        logger.info(f"Created {self.endpoint} record")
        return data

    async def update(self, entity_id: EntityId, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = await self.api.put(self.item_path(entity_id), payload)
        logger.info(f"Updated {self.endpoint} record {entity_id}")
        return data

    async def patch(self, entity_id: EntityId, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self.api.patch(self.item_path(entity_id), payload)

    async def delete(self, entity_id: EntityId) -> Dict[str, Any]:
        data = await self.api.delete(self.item_path(entity_id))
        logger.info(f"Deleted {self.endpoint} record {entity_id}")
        return data
