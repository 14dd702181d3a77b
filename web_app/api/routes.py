"""API routes implementation."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from .schemas import (
    CountryResponse,
    DestinationResponse,
    HealthResponse,
    ErrorResponse,
)
from geo_redirect.country import UNKNOWN_COUNTRY
from geo_redirect.common.headers import NO_CACHE_HEADERS, get_client_ip, is_debug_requested

router = APIRouter()
logger = logging.getLogger("geoip_api.api")

ALLOWED_METHODS = ("GET", "POST")
# Every other method is routed here too so it gets the JSON 405 body
ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def _utc_timestamp() -> str:
    """ISO 8601 with milliseconds and a Z suffix, e.g. 2024-01-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.api_route(
    "/country",
    methods=ROUTED_METHODS,
    response_model=CountryResponse,
    responses={
        405: {"model": ErrorResponse, "description": "Method not allowed"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Detect visitor country",
    description="Detect the visitor's country from edge-platform headers. Returns XX when undetected.",
)
async def detect_country(request: Request):
    """Detect the visitor's country."""
    client_ip = get_client_ip(request.headers)

    logger.info(
        "Request received",
        extra={"payload": {
            "method": request.method,
            "url": str(request.url),
            "ip": client_ip,
            "userAgent": request.headers.get("user-agent", "unknown"),
        }},
    )

    if request.method not in ALLOWED_METHODS:
        logger.warning("Method not allowed", extra={"payload": {"method": request.method}})
        body = ErrorResponse(error="Method not allowed", country=UNKNOWN_COUNTRY)
        return JSONResponse(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            content=body.model_dump(exclude_none=True),
            headers={"Allow": ", ".join(ALLOWED_METHODS)},
        )

    development = False
    try:
        service = request.app.state.service
        development = service.flags.development
        detection = service.detect_country(request.headers)

        response = CountryResponse(
            country=detection["country"],
            timestamp=_utc_timestamp(),
        )

        if development or is_debug_requested(request.headers, request.query_params):
            response.debug = service.build_debug_payload(request.headers, detection)

        return JSONResponse(
            content=response.model_dump(exclude_none=True),
            headers=NO_CACHE_HEADERS,
        )

    except Exception as e:
        logger.error(
            "Error processing request",
            exc_info=True,
            extra={"payload": {"error": str(e), "ip": client_ip}},
        )
        body = ErrorResponse(
            error="Internal server error",
            country=UNKNOWN_COUNTRY,
            message=str(e) if development else "An error occurred",
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
        )


@router.get(
    "/redirect",
    response_model=DestinationResponse,
    summary="Get redirect destination",
    description="Resolve the visitor's country and return the screened destination, flag and page settings.",
)
async def get_destination(request: Request):
    """Get the redirect destination for the visitor."""
    service = request.app.state.service

    detection = service.detect_country(request.headers)
    destination = service.resolve_destination(
        detection["country"],
        params=request.query_params,
    )

    return JSONResponse(
        content=DestinationResponse(**destination).model_dump(),
        headers=NO_CACHE_HEADERS,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    return HealthResponse(
        status="healthy",
        environment=service.flags.environment.value,
        timestamp=datetime.now(timezone.utc),
    )
