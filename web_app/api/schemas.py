"""Pydantic schemas for API responses."""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime


class CountryResponse(BaseModel):
    """Detected visitor country."""

    country: str = Field(..., description="ISO 3166-1 alpha-2 code, or XX when undetected")
    timestamp: str = Field(..., description="ISO 8601 UTC timestamp")
    debug: Optional[Dict[str, Any]] = Field(None, description="Diagnostics, only in debug mode")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "country": "US",
                    "timestamp": "2024-01-01T12:00:00.000Z",
                }
            ]
        }
    }


class DestinationResponse(BaseModel):
    """Redirect destination and page assets for the visitor's country."""

    country: str
    redirect_url: Optional[str] = Field(None, description="Screened destination, null when none is safe")
    flag_url: Optional[str] = None
    title: Optional[str] = None
    settings: Dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    environment: str = Field(..., description="Deployment mode")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response. The country is always the unknown sentinel."""

    error: str = Field(..., description="Error message")
    country: str = Field("XX", description="Unknown country sentinel")
    message: Optional[str] = Field(None, description="Detailed error information")
