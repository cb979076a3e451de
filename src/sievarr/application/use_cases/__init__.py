from .multi_site_search import MultiSiteSearchUseCase

__all__ = ["MultiSiteSearchUseCase"]
