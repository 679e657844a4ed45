"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten", min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    result: str = Field(..., description="The complete short URL")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"result": "http://localhost:8080/1"},
            ]
        }
    }


class BatchShortenItem(BaseModel):
    """One URL of a batch shorten request."""

    correlation_id: str = Field(..., description="Client-chosen ID echoed in the response")
    original_url: str = Field(..., description="The URL to shorten", min_length=1)


class BatchShortenResult(BaseModel):
    """One short URL of a batch shorten response."""

    correlation_id: str
    short_url: str


class UserURLResponse(BaseModel):
    """A URL owned by the session."""

    short_url: str
    original_url: str
