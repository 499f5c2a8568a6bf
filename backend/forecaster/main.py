"""
Fantasy Playoff Forecaster - FastAPI Application

Main entry point for the web API.
"""

import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import simulations_router, scenarios_router
from .core.config import SimulationConfig, InvalidConfigurationError


logger = logging.getLogger("forecaster")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    try:
        config = SimulationConfig.from_env()
        logger.info(
            f"Simulation defaults: {config.n_simulations} trials, "
            f"{config.playoff_spots} playoff spots, {config.workers} workers"
        )
    except InvalidConfigurationError as e:
        logger.error(f"Invalid simulation settings on startup: {e}")
        # App still starts; simulation routes report the problem per request
    yield
    # Shutdown


# Create FastAPI app
app = FastAPI(
    title="Fantasy Playoff Forecaster",
    description="Monte Carlo playoff probabilities and what-if scenarios for fantasy leagues.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

# CORS configuration
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(simulations_router, prefix="/api")
app.include_router(scenarios_router, prefix="/api")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Fantasy Playoff Forecaster API",
        "version": "1.0.0",
        "docs": "/api/docs",
        "health": "/api/health"
    }
