# backend/utils/functions_client.py
import httpx
import logging

from config import settings
from schemas.order import OrderPayload
from schemas.product import ProductPayload, WireModel
from utils.errors import StorageFailure

logger = logging.getLogger(__name__)


class FunctionsClient:
    """Posts payloads to the ingest functions app."""

    def __init__(self, base_url: str = None, transport: httpx.AsyncBaseTransport = None):
        self.base_url = base_url or settings.FUNCTIONS_BASE_URL
        # Tests route requests straight into the functions app
        self.transport = transport

    async def _post(self, function_name: str, payload: WireModel) -> str:
        body = payload.model_dump_json(by_alias=True)
        async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"/{function_name}",
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
            except httpx.RequestError as e:
                logger.error(f"Error calling function {function_name}: {e}")
                raise StorageFailure(f"{function_name} is unreachable") from e

        if not response.is_success:
            logger.error(f"Error calling function {function_name}: {response.status_code}")
            raise StorageFailure(f"{function_name} failed with status {response.status_code}")
        return response.text

    async def store_product(self, product: ProductPayload) -> str:
        return await self._post("StoreProduct", product)

    async def store_order(self, order: OrderPayload) -> str:
        return await self._post("StoreCustomerOrder", order)


functions_client = FunctionsClient()
