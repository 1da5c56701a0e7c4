"""API schemas for the feed service.

Pydantic models for JSON responses.
"""

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Error payload returned by every endpoint instead of its normal body."""

    error: str = Field(..., description="Error code, e.g. ERR_CURRENCY")
    message: str = Field(..., description="Human-readable error message")
    hint: str = Field(default="", description="Accepted values or how to fix the request")
    request_id: str | None = Field(default=None, description="Request ID for correlation")


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


# ============================================================================
# Feed Schemas
# ============================================================================


class PlatformInfo(BaseModel):
    """Store platform the feed is generated from."""

    name: str
    version: str


class FeedOptions(BaseModel):
    """Values a feed can be requested with."""

    language: list[str] = Field(default_factory=list)
    currency: list[str] = Field(default_factory=list)


class LanguageConfiguration(BaseModel):
    """Default feed settings for one language."""

    language: str
    prices: bool
    taxes: bool


class ModuleInfo(BaseModel):
    """Exporter module information."""

    version: str
    feed: str
    options: FeedOptions
    configuration: dict[str, LanguageConfiguration]


class DiscoveryResponse(BaseModel):
    """Discovery document for the indexing service installer."""

    platform: PlatformInfo
    module: ModuleInfo
