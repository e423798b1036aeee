"""Configuration settings for the application."""
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

# Ensure .env values are loaded into os.environ so LOG_LEVEL is visible
# to the logging setup before settings are constructed.
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Catalog (webshop hub API)
    catalog_base_url: str = Field(default="https://webshop.transgourmet.ch", alias="CATALOG_BASE_URL")
    # Host serving article images; falls back to the catalog host when empty
    catalog_image_base_url: str = Field(default="", alias="CATALOG_IMAGE_BASE_URL")
    # Catalog request timeout in seconds
    catalog_timeout: float = Field(default=10.0, alias="CATALOG_TIMEOUT")
    catalog_search_page_size: int = Field(default=3, alias="CATALOG_SEARCH_PAGE_SIZE")
    # Max concurrent article lookups while enriching a single cart
    enrichment_concurrency: int = Field(default=8, alias="ENRICHMENT_CONCURRENCY")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    project_name: str = "Webshop Cart"
    api_version: str = "v1"

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True

    @property
    def image_base_url(self) -> str:
        """Base URL for article images."""
        return (self.catalog_image_base_url or self.catalog_base_url).rstrip("/")


settings = Settings()
