"""
Central configuration module for the Retro Meeting server
Reads and validates environment variables with strict checks for production
"""
import os
import sys
from typing import Optional, List

# Load environment variables from .env file if it exists (dev only)
try:
    from dotenv import load_dotenv
    if os.getenv("ENV", "dev").lower() == "dev":
        load_dotenv()
except ImportError:
    pass


class Config:
    """Central configuration class with environment variable validation"""

    # Environment
    ENV: str = os.getenv("ENV", "dev").lower()

    # Required for all environments
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./retro_meeting.db")

    PORT: int = int(os.getenv("PORT", "8000"))
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000")

    # CORS
    CORS_ORIGINS: List[str] = []

    # Database pool (PostgreSQL only)
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "900"))
    DB_POOL_TIMEOUT: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = os.getenv("STRIPE_SECRET_KEY")
    STRIPE_WEBHOOK_SECRET: Optional[str] = os.getenv("STRIPE_WEBHOOK_SECRET")
    STRIPE_PLAN_ID: str = os.getenv("STRIPE_PLAN_ID", "retro-monthly-seat")
    TRIAL_PERIOD_DAYS: int = int(os.getenv("TRIAL_PERIOD_DAYS", "30"))

    # Billing rules
    MAX_MONTHLY_PAUSES: int = int(os.getenv("MAX_MONTHLY_PAUSES", "2"))

    # Uploads
    MAX_AVATAR_FILE_SIZE: int = int(os.getenv("MAX_AVATAR_FILE_SIZE", str(1024 * 1024)))
    STORAGE_PROVIDER: str = os.getenv("STORAGE_PROVIDER", "local").lower()
    STORAGE_PATH: str = os.getenv("STORAGE_PATH", "./storage")
    S3_BUCKET_NAME: Optional[str] = os.getenv("S3_BUCKET_NAME")
    S3_REGION: str = os.getenv("S3_REGION", "us-east-1")
    S3_BASE_PATH: str = os.getenv("S3_BASE_PATH", "store")
    S3_PUT_URL_EXPIRES: int = int(os.getenv("S3_PUT_URL_EXPIRES", "900"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __init__(self):
        """Initialize configuration and validate required variables"""
        self._load_cors_origins()
        self._validate()

    def _load_cors_origins(self):
        """Web client origins allowed by CORS, plus any listed in CORS_ORIGINS"""
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
        for origin in os.getenv("CORS_ORIGINS", "").split(","):
            origin = origin.strip()
            if origin and origin not in origins:
                origins.append(origin)
        self.CORS_ORIGINS = origins

    def _validate(self):
        """Validate required configuration based on environment"""
        errors = []

        if self.ENV not in ["dev", "test", "staging", "prod"]:
            errors.append(f"Invalid ENV value: {self.ENV}. Must be 'dev', 'test', 'staging', or 'prod'")

        # SECRET_KEY signs auth tokens
        if not self.SECRET_KEY:
            errors.append("SECRET_KEY is required but not set")
        elif len(self.SECRET_KEY) < 32:
            errors.append(f"SECRET_KEY must be at least 32 characters (current: {len(self.SECRET_KEY)})")

        if not self.DATABASE_URL:
            errors.append("DATABASE_URL is required but not set")
        elif not self.DATABASE_URL.startswith(("postgresql", "sqlite")):
            errors.append(f"DATABASE_URL must be a PostgreSQL or SQLite connection string (got: {self.DATABASE_URL[:30]}...)")
        elif self.ENV in ["staging", "prod"] and self.DATABASE_URL.startswith("sqlite"):
            errors.append("SQLite is only supported in dev and test")

        if self.MAX_MONTHLY_PAUSES < 0:
            errors.append("MAX_MONTHLY_PAUSES cannot be negative")

        if self.STORAGE_PROVIDER not in ["local", "s3"]:
            errors.append(f"Invalid STORAGE_PROVIDER: {self.STORAGE_PROVIDER}. Must be 'local' or 's3'")
        elif self.STORAGE_PROVIDER == "s3" and not self.S3_BUCKET_NAME:
            errors.append("S3_BUCKET_NAME is required when STORAGE_PROVIDER is 's3'")

        if self.ENV in ["staging", "prod"]:
            if not self.STRIPE_SECRET_KEY:
                errors.append(f"STRIPE_SECRET_KEY is required in {self.ENV}")
            if not self.STRIPE_WEBHOOK_SECRET:
                errors.append(f"STRIPE_WEBHOOK_SECRET is required in {self.ENV}")
            if not self.API_BASE_URL.startswith("https://"):
                errors.append("API_BASE_URL must use HTTPS in staging/production")

        # Fail fast in staging/prod
        if errors and self.ENV in ["staging", "prod"]:
            self._report("CONFIGURATION VALIDATION FAILED", errors)
            sys.exit(1)
        if errors and self.ENV == "dev":
            self._report("CONFIGURATION WARNINGS (dev mode - continuing)", errors)

        self.errors = errors

    @staticmethod
    def _report(title: str, errors: List[str]) -> None:
        rule = "=" * 60
        lines = [rule, title, rule] + [f"  - {error}" for error in errors] + [rule]
        print("\n".join(lines), file=sys.stderr)

    @property
    def is_dev(self) -> bool:
        """Check if running in development mode"""
        return self.ENV == "dev"

    @property
    def is_prod(self) -> bool:
        """Check if running in production mode"""
        return self.ENV == "prod"

    @property
    def uses_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


# Create global config instance
config = Config()
