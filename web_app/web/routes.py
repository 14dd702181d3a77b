"""Web routes: the browser-facing redirect."""

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import RedirectResponse

from geo_redirect.common.headers import NO_CACHE_HEADERS

router = APIRouter()


@router.get("/go", include_in_schema=False)
async def redirect_visitor(request: Request):
    """Redirect the visitor to the destination configured for their country."""
    service = request.app.state.service

    detection = service.detect_country(request.headers)
    destination = service.resolve_destination(
        detection["country"],
        params=request.query_params,
    )

    if not destination["redirect_url"]:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No redirect destination available",
        )

    # 302 so browsers do not cache a per-country answer
    return RedirectResponse(
        url=destination["redirect_url"],
        status_code=status.HTTP_302_FOUND,
        headers=NO_CACHE_HEADERS,
    )
