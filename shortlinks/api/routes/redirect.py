"""Short code redirection endpoint with click recording."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.responses import RedirectResponse

from shortlinks.api.dependencies import client_identifier, get_registry
from shortlinks.core.access_logger import log_url_access
from shortlinks.models import DIRECT, UNKNOWN
from shortlinks.services.exceptions import URLExpiredError, URLNotFoundError
from shortlinks.services.registry import Registry

router = APIRouter(tags=["redirect"])


@router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    responses={
        404: {"description": "Short URL not found"},
        410: {"description": "Short URL has expired"}
    }
)
async def redirect_to_original_url(
    request: Request,
    short_code: str,
    registry: Registry = Depends(get_registry)
):
    """Redirect to the target URL, recording the click before responding."""
    user_agent = request.headers.get("user-agent")
    referer = request.headers.get("referer")
    client = client_identifier(request)

    try:
        target_url = await registry.resolve(
            short_code,
            user_agent=user_agent,
            referer=referer,
            client_identifier=client
        )
    except URLNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except URLExpiredError as e:
        raise HTTPException(status_code=410, detail=str(e))

    log_url_access(
        short_code=short_code.lower(),
        client=client or UNKNOWN,
        user_agent=user_agent or UNKNOWN,
        referer=referer or DIRECT
    )
    return RedirectResponse(url=target_url)
