"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "1.1.7"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"

    # Store links
    store_url: str = "http://localhost/catalog/"
    product_page: str = "product_info.php"
    images_dir: str = "images/"

    # Platform reported by the discovery endpoint
    platform_name: str = "osCommerce"
    platform_version: str = "2.3.4"

    # Feed defaults
    feed_language: str = "en"
    feed_currency: str = "USD"
    feed_chunk_size: int = 100
    feed_show_prices: bool = True
    feed_show_final_prices: bool = True
    feed_repair_mojibake: bool = False

    # Separators
    field_separator: str = "|"
    category_separator: str = "%%"
    category_tree_separator: str = ">"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
