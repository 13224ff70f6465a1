"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 8000

Endpoints:
    GET    /v1/health
    POST   /v1/route/optimize
    POST   /v1/route/position
    POST   /v1/route/parse
    POST   /v1/route/sessions
    POST   /v1/route/sessions/{session_id}/landmarks
    DELETE /v1/route/sessions/{session_id}/landmarks/{landmark_id}
    GET    /v1/route/sessions/{session_id}/combined
    GET    /v1/route/sessions/{session_id}/base
    DELETE /v1/route/sessions/{session_id}
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.routes import health, route

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Spotlight Route Optimizer API",
    version="1.0.0",
    description=(
        "Greedy landmark insertion into a fixed city route. "
        "Great-circle (haversine) distances; no road network."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# Allow the planner frontend (any origin during development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/v1",       tags=["Health"])
app.include_router(route.router,  prefix="/v1/route", tags=["Route"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=8000, reload=True)
