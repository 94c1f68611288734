"""Nutrient totals models."""

from dataclasses import dataclass

# Rows come from the aggregation function untouched. Recognized keys include
# NutrientID, NutrientName, total, seen_in, highest_value, highest_id,
# issue_w, issue_m, WomanMin, WomanMax, ManMin and ManMax.
NutrientRow = dict[str, object]
NutrsTotals = dict[str, NutrientRow]


@dataclass(frozen=True)
class TotalsFound:
    """The response carried a totals mapping."""

    totals: NutrsTotals


@dataclass(frozen=True)
class NoTotals:
    """The response did not match any accepted totals shape."""


@dataclass(frozen=True)
class ProxyResult:
    """Response relayed from the aggregation function."""

    status_code: int
    body: bytes | str | None = None
    content_type: str | None = None
    json_body: object | None = None
    is_json: bool = False


@dataclass(frozen=True)
class UpstreamResponse:
    """Raw reply from the aggregation function, kept as the bytes received."""

    status_code: int
    content_type: str
    content: bytes

    @property
    def text(self) -> str:
        """Return the body decoded for logging."""
        return self.content.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        """Return true for 2xx statuses."""
        return 200 <= self.status_code < 300
