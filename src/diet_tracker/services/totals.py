"""Nutrient totals: upstream relay and response reconciliation."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from diet_tracker.config import MISSING_BACKEND_MESSAGE
from diet_tracker.domain.nutrients import (
    NoTotals,
    NutrsTotals,
    ProxyResult,
    TotalsFound,
    UpstreamResponse,
)

_TOTALS_KEYS = ("nutrsTotals", "nutrs_totals")

_logger = logging.getLogger(__name__)


class NutrientFunctionClient(Protocol):
    """Interface for the nutrient aggregation function."""

    async def invoke(self, body: object) -> UpstreamResponse:
        """Post a JSON body and return the raw response."""


@dataclass
class TotalsProxyService:
    """Forward food lists to the aggregation function and relay its reply."""

    client: NutrientFunctionClient | None

    @property
    def configured(self) -> bool:
        """Return true when an upstream client is available."""
        return self.client is not None

    async def forward(self, body: object) -> ProxyResult:
        """Relay the body upstream, preserving status and content type."""
        if self.client is None:
            return ProxyResult(status_code=500, body=MISSING_BACKEND_MESSAGE)
        try:
            upstream = await self.client.invoke(body)
        except Exception as exc:
            _logger.exception("Aggregation function request failed")
            return ProxyResult(status_code=500, body=str(exc) or type(exc).__name__)

        _logger.debug("Upstream content-type: %s", upstream.content_type)
        _logger.debug("Upstream body: %s", upstream.text)

        if not upstream.ok:
            return ProxyResult(
                status_code=upstream.status_code,
                body=upstream.content or "Upstream error",
                content_type=upstream.content_type or None,
            )

        if "application/json" in upstream.content_type:
            try:
                parsed = json.loads(upstream.content, parse_constant=_reject_constant)
            except ValueError:
                _logger.warning("Failed to parse upstream JSON, returning raw text")
            else:
                return ProxyResult(status_code=200, json_body=parsed, is_json=True)

        return ProxyResult(
            status_code=200,
            body=upstream.content,
            content_type=upstream.content_type or None,
        )


def _reject_constant(name: str) -> object:
    raise ValueError(f"Invalid JSON constant: {name}")


def is_totals_mapping(value: object) -> bool:
    """Return true for a mapping of string keys to record values."""
    return isinstance(value, dict) and all(
        isinstance(key, str) and isinstance(row, dict) for key, row in value.items()
    )


def reconcile_totals(body: object) -> TotalsFound | NoTotals:
    """Decode the accepted totals shapes in priority order."""
    if not isinstance(body, dict):
        return NoTotals()
    for key in _TOTALS_KEYS:
        if key in body and is_totals_mapping(body[key]):
            return TotalsFound(totals=body[key])
    if is_totals_mapping(body):
        return TotalsFound(totals=body)
    return NoTotals()


def totals_or_none(body: object) -> NutrsTotals | None:
    """Return the reconciled totals, or None when the body has none."""
    decoded = reconcile_totals(body)
    if isinstance(decoded, TotalsFound):
        return decoded.totals
    return None
