"""
Site configuration loader (table source, column mappings, business details, cache)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "site_config.yml"


class BusinessConfig(BaseModel):
    name: str = "Upadhyay Vision Care Centre"
    whatsapp_phone: str = "917055502333"
    call_phone: str = "+917055502333"


class SheetTables(BaseModel):
    products: str = "Products"
    gallery: str = "Surgery_Gallery"


class SheetsConfig(BaseModel):
    base_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    api_key_env: str = "GOOGLE_SHEETS_API_KEY"
    spreadsheet_id_env: str = "GOOGLE_SPREADSHEET_ID"
    timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    tables: SheetTables = Field(default_factory=SheetTables)

    @property
    def api_key(self) -> str:
        return os.getenv(self.api_key_env, "").strip()

    @property
    def spreadsheet_id(self) -> str:
        return os.getenv(self.spreadsheet_id_env, "").strip()


class ProductColumns(BaseModel):
    """Normalized column keys of the Products tab."""

    image_1: str = "image_url_1"
    image_2: str = "image_url_2"
    image_3: str = "image_url_3"
    name: str = "product_name"
    description: str = "basic_description"
    dimensions: str = "frame_dimensions"
    color: str = "frame_color"
    weight: str = "frame_weight"
    brand: str = "brand_name"
    age_range: str = "age_range"
    shape: str = "frame_shape"
    material: str = "material_type"

    @property
    def image_fields(self) -> List[str]:
        return [self.image_1, self.image_2, self.image_3]

    @property
    def search_fields(self) -> List[str]:
        return [self.name, self.description, self.brand, self.shape, self.material]


class GalleryColumns(BaseModel):
    """Normalized column keys of the Surgery_Gallery tab."""

    image: str = "image_url"
    name: str = "surgery_name"
    description: str = "description"
    category: str = "category"

    @property
    def search_fields(self) -> List[str]:
        return [self.name, self.description, self.category]


class ColumnsConfig(BaseModel):
    products: ProductColumns = Field(default_factory=ProductColumns)
    gallery: GalleryColumns = Field(default_factory=GalleryColumns)


class PreviewLimitConfig(BaseModel):
    products: int = Field(default=3, ge=0, le=50)
    gallery: int = Field(default=3, ge=0, le=50)


class PlaceholderConfig(BaseModel):
    card: str = "https://via.placeholder.com/300x250?text=No+Image"
    product_modal: str = "https://via.placeholder.com/400x400?text=No+Image"
    gallery_modal: str = "https://via.placeholder.com/500x500?text=No+Image"
    detail: str = "https://via.placeholder.com/600x400?text=No+Image"


class CacheConfig(BaseModel):
    enabled: bool = True
    name: str = "vision-care-cache-v2"
    assets: List[str] = Field(default_factory=lambda: ["styles.css", "app.js"])


class ContactConfig(BaseModel):
    submit_delay_seconds: float = Field(default=1.0, ge=0.0, le=30.0)


class StartupConfig(BaseModel):
    load_timeout_seconds: float = Field(default=15.0, gt=0, le=300)
    banner_dismiss_ms: int = Field(default=5000, ge=0)


class SiteConfig(BaseModel):
    business: BusinessConfig = Field(default_factory=BusinessConfig)
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)
    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    preview_limit: PreviewLimitConfig = Field(default_factory=PreviewLimitConfig)
    placeholders: PlaceholderConfig = Field(default_factory=PlaceholderConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    contact: ContactConfig = Field(default_factory=ContactConfig)
    startup: StartupConfig = Field(default_factory=StartupConfig)
    sample_data_path: Optional[str] = None


def load_site_config(config_path: Optional[Path] = None) -> SiteConfig:
    """
    Load and validate the site configuration from YAML

    Args:
        config_path: Path to config file. Defaults to $SITE_CONFIG_PATH, then config/site_config.yml

    Returns:
        Validated SiteConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        env_path = os.getenv("SITE_CONFIG_PATH")
        config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Site config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    try:
        cfg = SiteConfig(**data)
        logger.info("Successfully loaded site config from %s", config_path)
        return cfg
    except ValidationError as e:
        logger.error("Site config validation failed: %s", e)
        raise
