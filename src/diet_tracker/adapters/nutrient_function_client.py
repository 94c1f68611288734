"""Client for the hosted nutrient aggregation function."""

from dataclasses import dataclass

import httpx

from diet_tracker.domain.nutrients import UpstreamResponse
from diet_tracker.services.totals import NutrientFunctionClient


@dataclass
class HttpxNutrientFunctionClient(NutrientFunctionClient):
    """HTTPX-backed client for the aggregation edge function."""

    endpoint: str
    service_key: str
    http_client: httpx.AsyncClient
    timeout: float = 30

    @classmethod
    def create(
        cls,
        supabase_url: str,
        service_key: str,
        function_name: str,
        timeout: float = 30,
    ) -> "HttpxNutrientFunctionClient":
        """Create a client for <supabase_url>/functions/v1/<function_name>."""
        endpoint = f"{supabase_url.rstrip('/')}/functions/v1/{function_name}"
        return cls(
            endpoint=endpoint,
            service_key=service_key,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def invoke(self, body: object) -> UpstreamResponse:
        """Post the body and read the reply once as bytes."""
        response = await self.http_client.post(
            self.endpoint,
            json=body,
            headers={"Authorization": f"Bearer {self.service_key}"},
            timeout=self.timeout,
        )
        return UpstreamResponse(
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
            content=response.content,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
