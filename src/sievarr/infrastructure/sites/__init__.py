from .loader import discover_site_definitions, load_site_definition
from .schema import (
    DetailEntry,
    ElementQuery,
    RowsQuery,
    SearchEntry,
    SiteMetadata,
    SiteUserConfig,
    TagQuery,
    merge_models,
)

__all__ = [
    "DetailEntry",
    "ElementQuery",
    "RowsQuery",
    "SearchEntry",
    "SiteMetadata",
    "SiteUserConfig",
    "TagQuery",
    "discover_site_definitions",
    "load_site_definition",
    "merge_models",
]
