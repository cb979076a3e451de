from .site import SitePort

__all__ = ["SitePort"]
