"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Storage
    storage_backend: str = "memory"  # "memory" or "sql"
    database_url: str = "postgresql+asyncpg://storefront:storefront_dev_password@db:5432/storefront"

    # Media uploads
    upload_dir: str = "public/uploads"
    upload_url_prefix: str = "/uploads"
    max_image_size: int = 5 * 1024 * 1024
    max_video_size: int = 50 * 1024 * 1024

    # Shop
    shop_page_size: int = 20
    reveal_delay_seconds: float = 0.3
    search_debounce_seconds: float = 0.3
    comparison_capacity: int = 4
    similar_products_limit: int = 8
    search_product_limit: int = 10
    search_category_limit: int = 5
    category_search_limit: int = 20

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
