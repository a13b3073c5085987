"""Configuration management for the application."""
from pydantic_settings import BaseSettings
from typing import Dict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # API Configuration
    api_title: str = "Simple Tax API"
    api_version: str = "1.0.0"
    api_prefix: str = "/api/v1"
    
    # CORS Configuration
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    
    # Logging
    log_level: str = "INFO"
    
    # Default tax properties (JSON object), e.g.
    # TAX_PROPERTIES='{"simpletax.taxResolver": "InvoiceItemEndDateBasedResolver"}'
    tax_properties: Dict[str, str] = {}
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
