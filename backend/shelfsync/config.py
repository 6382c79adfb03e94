from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field, model_validator, field_validator

BASE_DIR = Path(__file__).resolve().parent.parent  # backend/


class Settings(BaseSettings):
    # ===== ENVIRONMENT =====
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # ===== DATABASE =====
    database_url: str = Field(default="sqlite:///./data/shelfsync.db")
    sql_echo: bool = Field(default=False)

    # ===== CORS =====
    allowed_origins: str = Field(default="http://localhost:5173,http://localhost:3000")

    # ===== INVENTORY =====
    recent_activity_limit: int = Field(default=10)

    # ===== LOGGING =====
    log_dir: str = Field(default="logs")
    log_to_file: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        case_sensitive = False

    @field_validator("recent_activity_limit", mode="after")
    @classmethod
    def positive_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("RECENT_ACTIVITY_LIMIT must be at least 1")
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.strip().upper() if v and v.strip() else "INFO"

    @model_validator(mode="after")
    def validate_production_database(self):
        if self.environment == "production" and self.database_url.startswith("sqlite"):
            raise ValueError("DATABASE_URL must point to a server database in production.")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


settings = Settings()
