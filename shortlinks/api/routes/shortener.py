from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from shortlinks.api import schemas
from shortlinks.api.dependencies import get_base_url, get_registry
from shortlinks.services.exceptions import (
    CodeCollisionError,
    InvalidInputError,
    ShortCodeGenerationError,
    URLNotFoundError,
)
from shortlinks.services.registry import Registry

router = APIRouter(tags=["shortener"])


@router.post(
    "/shorturls",
    response_model=schemas.ShortURLCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Invalid URL or validity"},
        409: {"model": schemas.ErrorResponse, "description": "Shortcode already exists"}
    }
)
async def create_short_url(
    url_data: schemas.ShortURLCreateRequest,
    registry: Registry = Depends(get_registry),
    base_url: str = Depends(get_base_url)
):
    # An explicit null validity is rejected, only an omitted one gets the default
    options = {}
    if "validity" in url_data.model_fields_set:
        options["validity_minutes"] = url_data.validity
    try:
        entry = await registry.create(
            target_url=url_data.url,
            custom_code=url_data.shortcode,
            **options
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CodeCollisionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ShortCodeGenerationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return schemas.ShortURLCreateResponse.from_entry(entry, base_url)


@router.get(
    "/shorturls/{short_code}",
    response_model=schemas.URLStatsResponse,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Short URL not found"}
    }
)
async def get_url_stats(
    short_code: str = Path(..., description="The short code of the URL"),
    registry: Registry = Depends(get_registry)
):
    try:
        report = await registry.stats(short_code)
    except URLNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return schemas.URLStatsResponse.from_report(report)


@router.get(
    "/api/all-urls",
    response_model=List[schemas.URLStatsResponse]
)
async def list_all_urls(registry: Registry = Depends(get_registry)):
    """Statistics for every short link, oldest first."""
    reports = await registry.list_all()
    return [schemas.URLStatsResponse.from_report(report) for report in reports]
