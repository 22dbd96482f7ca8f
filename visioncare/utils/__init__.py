from .config_loader import SiteConfig, load_site_config

__all__ = ["SiteConfig", "load_site_config"]
