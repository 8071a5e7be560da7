"""
Environment configuration for the school fee engine.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)

FAMILY_DISCOUNT_POLICIES = ("snapshot", "retroactive")


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application configuration
    APP_NAME: str = Field(default="School Fee Engine", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="v1", alias="PROJECT_VERSION")
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = Field(default=["*"], alias="BACKEND_CORS_ORIGINS")

    # Database configuration - support both individual fields and DATABASE_URL
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "school_fees"
    DB_POOL_SIZE: int = 20
    DB_POOL_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text
    LOG_FILE: Optional[str] = None
    LOG_SQL_QUERIES: bool = False
    ENABLE_STRUCTURED_LOGGING: bool = False

    # Fees and billing
    CURRENCY: str = "INR"
    MONEY_QUANTUM: Decimal = Decimal("0.01")
    ALLOCATION_DUE_DAY: int = Field(default=15, ge=1, le=31)
    MATERIALIZE_BATCH_SIZE: int = Field(default=200, ge=1)
    FAMILY_DISCOUNT_POLICY: str = "snapshot"

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS_ORIGINS from a comma separated string or JSON list"""
        if isinstance(v, str):
            if v.startswith('[') and v.endswith(']'):
                import json
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return level

    @field_validator('FAMILY_DISCOUNT_POLICY')
    @classmethod
    def validate_discount_policy(cls, v: str) -> str:
        policy = v.strip().lower()
        if policy not in FAMILY_DISCOUNT_POLICIES:
            raise ValueError(
                f"FAMILY_DISCOUNT_POLICY must be one of {', '.join(FAMILY_DISCOUNT_POLICIES)}"
            )
        return policy

    @field_validator('MONEY_QUANTUM')
    @classmethod
    def validate_money_quantum(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("MONEY_QUANTUM must be positive")
        return v

    def get_database_url(self) -> str:
        """Construct database URL from components or use provided URL"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
