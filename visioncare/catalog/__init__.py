from .store import CatalogStore, GalleryCatalog, ProductCatalog

__all__ = ["CatalogStore", "GalleryCatalog", "ProductCatalog"]
