"""
FastAPI Server for Google Maps Reviews Extractor

Provides API endpoints for:
- Fetching reviews for a place
- Fetching business details with a review summary
- Fetching a review summary only
- Searching businesses by query and location
"""

import logging
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .config import API_HOST, API_PORT, DEFAULT_REVIEWS_LIMIT, DEFAULT_SEARCH_LIMIT, LANGUAGE
from .exceptions import CaptchaError, FetchError, FetchTimeoutError
from .extraction import service

logger = logging.getLogger(__name__)


# FastAPI app
app = FastAPI(title="Google Maps Reviews Extractor API")

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request Models
class PlaceRequest(BaseModel):
    place_id: str = Field(..., min_length=1)
    language: Optional[str] = LANGUAGE


class ReviewsRequest(PlaceRequest):
    sort_by: Literal["relevant", "newest", "highest", "lowest"] = "newest"
    limit: int = Field(DEFAULT_REVIEWS_LIMIT, ge=1, le=200)


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    limit: int = Field(DEFAULT_SEARCH_LIMIT, ge=1, le=100)
    language: Optional[str] = LANGUAGE


def _raise_for_fetch_error(e: FetchError):
    """Map fetch-layer errors onto HTTP status codes."""
    logger.warning("Upstream fetch failed: %s", e)
    if isinstance(e, CaptchaError):
        raise HTTPException(status_code=429, detail=str(e))
    if isinstance(e, FetchTimeoutError):
        raise HTTPException(status_code=504, detail="Request timed out")
    raise HTTPException(status_code=502, detail=str(e))


# API Endpoints
@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.post("/api/reviews")
def get_reviews(request: ReviewsRequest):
    """Reviews for a place, sorted and limited."""
    try:
        return service.fetch_reviews(
            request.place_id,
            sort=request.sort_by,
            limit=request.limit,
            language=request.language or LANGUAGE,
        )
    except FetchError as e:
        _raise_for_fetch_error(e)


@app.post("/api/business")
def get_business(request: PlaceRequest):
    """Business details plus review summary."""
    try:
        return service.fetch_business_details(request.place_id, language=request.language or LANGUAGE)
    except FetchError as e:
        _raise_for_fetch_error(e)


@app.post("/api/summary")
def get_summary(request: PlaceRequest):
    """Review summary for a place."""
    try:
        return service.fetch_review_summary(request.place_id, language=request.language or LANGUAGE)
    except FetchError as e:
        _raise_for_fetch_error(e)


@app.post("/api/search")
def search(request: SearchRequest):
    """Businesses matching a query in a location."""
    try:
        return service.search_businesses(
            request.query,
            request.location,
            limit=request.limit,
            language=request.language or LANGUAGE,
        )
    except FetchError as e:
        _raise_for_fetch_error(e)


def run_server(host: str = API_HOST, port: int = API_PORT):
    """Run the API server."""
    import uvicorn
    uvicorn.run(app, host=host, port=port)
