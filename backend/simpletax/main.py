"""FastAPI application entry point."""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from simpletax.config import settings
from simpletax.core.logging_config import setup_logging
from simpletax.services.simple_tax_config import SimpleTaxConfig
from simpletax.api.routes import tax_codes

# Import tax resolvers to register them
import simpletax.resolving  # noqa: F401

setup_logging(settings.log_level)

app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Configuration-driven sales tax API"
)

# Default tax configuration, built once from the application settings
app.state.tax_config = SimpleTaxConfig(settings.tax_properties, logging.getLogger("simpletax.config"))

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tax_codes.router, prefix=f"{settings.api_prefix}/taxCodes", tags=["taxCodes"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Simple Tax API",
        "version": settings.api_version,
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
