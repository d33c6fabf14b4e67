from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal

class Settings(BaseSettings):
    PROJECT_NAME: str = "Recipe Catalog API"
    ROOT_PATH: str = ""
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"

    SECRET_KEY: str = "your-super-secret-key"  # Default for dev, override in prod
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Storage
    # "sql" keeps documents in the DATABASE_URL database, "memory" in-process only
    STORE_BACKEND: Literal["sql", "memory"] = "sql"
    DATABASE_URL: str = "sqlite:///./recipes.db"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000"
    ]

    # Rate limiting (slowapi syntax)
    RATE_LIMIT: str = "100/minute"
    RATE_LIMIT_ENABLED: bool = True

    # Fraction of fast, successful requests that get a structured log line
    LOG_SAMPLE_RATE: float = 0.05

    # Ingredients have no owner field; when enabled, mutations require the
    # caller to own the parent recipe.
    ENFORCE_INGREDIENT_OWNERSHIP: bool = False

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")

settings = Settings()
