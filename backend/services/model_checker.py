import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from services.openrouter import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)


class ModelChecker:
    """Looks up which models OpenRouter currently serves."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def fetch_available_models(self) -> List[Dict[str, Any]]:
        """Return the provider's model list, or an empty list on any failure."""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get("/models", headers={"Authorization": f"Bearer {self.api_key}"})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching models: {str(e)}")
            return []

        models = data.get("data") if isinstance(data, dict) else None
        if not isinstance(models, list):
            logger.error("Error fetching models: response has no 'data' list")
            return []
        return [m for m in models if isinstance(m, dict) and "id" in m]

    async def is_model_available(self, model_id: str) -> bool:
        models = await self.fetch_available_models()
        return any(m["id"] == model_id for m in models)

    async def get_free_models(self) -> List[Dict[str, Any]]:
        models = await self.fetch_available_models()
        return [m for m in models if str(m["id"]).endswith(":free")]

    async def check_models(self, model_ids: Iterable[str]) -> Dict[str, bool]:
        """Map each requested model id to whether it is currently listed."""
        available = {m["id"] for m in await self.fetch_available_models()}
        return {model_id: model_id in available for model_id in model_ids}
