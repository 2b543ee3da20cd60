"""
Configuration settings for the YojanaMitra eligibility backend
"""
from typing import List, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application Configuration
    app_name: str = Field(default="YojanaMitra Eligibility API")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # API Configuration
    api_prefix: str = Field(default="/api")
    cors_origins: str = Field(default="http://localhost:3000,http://localhost:8080")

    # Scheme Catalog Configuration
    catalog_backend: Literal["file", "mongo"] = Field(default="file")
    catalog_path: str = Field(default="data/schemes.json")

    # MongoDB Configuration (only used when catalog_backend is "mongo")
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_db_name: str = Field(default="yojanamitra")
    mongodb_collection: str = Field(default="schemes")

    # OpenAI-compatible API Configuration (optional)
    openai_api_key: Optional[str] = Field(default=None)
    openai_base_url: str = Field(default="https://api.openai.com/v1")
    openai_model: str = Field(default="gpt-4o-mini")
    llm_timeout: float = Field(default=60.0, gt=0)  # seconds

    # Matching Configuration
    match_pool_size: int = Field(default=6, ge=1)
    explain_top_n: int = Field(default=3, ge=0)
    max_next_actions: int = Field(default=5, ge=0)

    def get_cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list"""
        if ',' in self.cors_origins:
            return [origin.strip() for origin in self.cors_origins.split(',')]
        return [self.cors_origins.strip()]

    @property
    def llm_enabled(self) -> bool:
        """Whether an explanation model is configured"""
        return bool(self.openai_api_key and self.openai_api_key != "your_openai_api_key_here")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create global settings instance
settings = Settings()
