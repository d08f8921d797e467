"""
API route handlers for listing extraction.
"""
import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from listing_scraper.errors import (
    ConfigurationMissing,
    FetchFailed,
    InvalidInput,
    UnsupportedSource,
)
from listing_scraper.pipeline import ListingExtractor, build_extractor

from ..config import config
from ..models import ErrorOut, ListingOut

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["listings"])

ExtractorFactory = Callable[[bool], ListingExtractor]


def get_extractor_factory() -> ExtractorFactory:
    """Dependency that builds an extractor for the requested fetch strategy."""
    return build_extractor


@router.options("/fetch", include_in_schema=False)
async def fetch_listing_preflight():
    """CORS pre-flight without Origin headers: succeed with no body."""
    return Response(status_code=200)


@router.get(
    "/fetch",
    response_model=ListingOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}, 502: {"model": ErrorOut}},
)
async def fetch_listing(
    url: Optional[str] = Query(None, description="Listing URL"),
    render: bool = Query(config.DEFAULT_USE_RENDERING_PROXY, description="Fetch through the rendering proxy"),
    make_extractor: ExtractorFactory = Depends(get_extractor_factory),
):
    """
    Fetch a marketplace listing and return its extracted fields.

    Access-Control-Allow-Origin: * is added by CORSMiddleware, which only
    does so when the request carries an Origin header.
    """
    if not url:
        raise HTTPException(status_code=400, detail="URL parameter required")

    try:
        record = await make_extractor(render).extract(url)
        return ListingOut.from_record(record)

    except (InvalidInput, UnsupportedSource) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationMissing as e:
        logger.error(f"Configuration error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except FetchFailed as e:
        logger.warning(f"Fetch failed for {url}: status={e.status} {e.message}")
        raise HTTPException(status_code=e.status if e.status >= 400 else 502, detail=e.message)
    except Exception as e:
        logger.error(f"Error extracting listing {url}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
