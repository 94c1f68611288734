"""Client for the totals proxy route."""

from dataclasses import dataclass
from typing import Protocol

import httpx

PROXY_PATH = "/api/supabase-function"


class TotalsFetchError(RuntimeError):
    """Raised when the totals proxy does not return usable JSON."""


class TotalsClient(Protocol):
    """Interface for requesting nutrient totals."""

    async def fetch(self, payload: dict[str, object]) -> object:
        """Post the food list and return the parsed JSON body."""

    async def close(self) -> None:
        """Release client resources."""


@dataclass
class HttpxTotalsClient(TotalsClient):
    """HTTPX-backed client posting food lists to the proxy route."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30

    @classmethod
    def create(cls, base_url: str, timeout: float = 30) -> "HttpxTotalsClient":
        """Create a totals client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def fetch(self, payload: dict[str, object]) -> object:
        """Post the food list to the proxy and parse its reply."""
        url = f"{self.base_url.rstrip('/')}{PROXY_PATH}"
        response = await self.http_client.post(url, json=payload, timeout=self.timeout)
        if not response.is_success:
            raise TotalsFetchError(
                f"Fetch error {response.status_code}: {response.text}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TotalsFetchError(f"Invalid totals response: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
