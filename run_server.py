#!/usr/bin/env python
"""
Run the API Server

Starts the FastAPI server for Google Maps reviews extraction.

Usage:
    python run_server.py

The server runs on http://localhost:8000 (GMAPS_API_HOST / GMAPS_API_PORT)

Endpoints:
    GET  /api/health   - Health check
    POST /api/reviews  - Reviews for a place
    POST /api/business - Business details + summary
    POST /api/summary  - Review summary
    POST /api/search   - Search businesses
"""

import logging

import uvicorn

from gmaps_reviews.config import API_HOST, API_PORT, LOG_FORMAT, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL.upper(), format=LOG_FORMAT)
uvicorn.run("gmaps_reviews.server:app", host=API_HOST, port=API_PORT, reload=False)
