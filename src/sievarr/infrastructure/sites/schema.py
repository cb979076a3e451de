"""Pydantic models for declarative site definitions.

Site definitions are plain data (YAML files or dicts built in Python).
Field names are snake_case; the camelCase spelling used by existing site
catalogues (``requestConfig``, ``switchFilters``, ``subTitle`` ...) is
accepted as an alias.  Python-built definitions may additionally carry
callables (filters, row filters, request transformers).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel, to_snake

from sievarr.infrastructure.common.parsers import parse_timezone_offset

SELF_SELECTOR = ":self"
DEFAULT_KEYWORD_PATH = "params.keywords"

_REQUEST_CONFIG_ALIASES: dict[str, str] = {
    "baseURL": "base_url",
    "baseUrl": "base_url",
    "responseType": "response_type",
}

M = TypeVar("M", bound=BaseModel)


class _SiteModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        arbitrary_types_allowed=True,
    )


def _normalize_request_config(value: Any) -> Any:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        return value
    return {_REQUEST_CONFIG_ALIASES.get(k, k): v for k, v in value.items()}


def _normalize_filters(value: Any) -> Any:
    """Accept a single filter or a list; bare strings name a registry filter."""
    if value is None:
        return None
    if callable(value) or isinstance(value, (str, Mapping, FilterSpec)):
        value = [value]
    return [{"name": f} if isinstance(f, str) else f for f in value]


def _shorthand_query(value: Any) -> Any:
    """A bare selector string (or list of them) stands for ``{selector: ...}``."""
    if isinstance(value, (str, list)):
        return {"selector": value}
    return value


class FilterSpec(_SiteModel):
    """Reference to a named filter in the value filter registry."""

    name: str
    args: list[Any] = Field(default_factory=list)


QueryFilter = Union[Callable[..., Any], FilterSpec]


class ElementQuery(_SiteModel):
    """How to locate and post-process one record field."""

    selector: str | list[str] | None = None
    text: Any = None
    filters: list[QueryFilter] | None = None
    switch_filters: dict[str, list[QueryFilter]] | None = None
    element_process: list[QueryFilter] | None = None
    case: dict[str, Any] | None = None
    data: str | None = None
    attr: str | None = None

    @field_validator("filters", "element_process", mode="before")
    @classmethod
    def _validate_filters(cls, v: Any) -> Any:
        return _normalize_filters(v)

    @field_validator("switch_filters", mode="before")
    @classmethod
    def _validate_switch_filters(cls, v: Any) -> Any:
        if v is None:
            return None
        if not isinstance(v, Mapping):
            raise ValueError("switch_filters must be a mapping of selector -> filters")
        return {sel: _normalize_filters(chain) for sel, chain in v.items()}

    @property
    def selectors(self) -> list[str]:
        if self.selector is None:
            return []
        if isinstance(self.selector, str):
            return [self.selector]
        return list(self.selector)


class RowsQuery(_SiteModel):
    """Locates the repeated structures holding one record each."""

    selector: str
    merge: int = Field(default=1, ge=1)
    filter: Callable[[list[Any]], list[Any]] | None = None


class TagQuery(_SiteModel):
    name: str
    selector: str


class AdvanceKeywordConfig(_SiteModel):
    """Alternate request branch selected by a ``"<token>|"`` keyword prefix."""

    enabled: bool = True
    request_config: dict[str, Any] | None = None
    request_config_transformer: Callable[..., Any] | None = None

    @field_validator("request_config", mode="before")
    @classmethod
    def _validate_request_config(cls, v: Any) -> Any:
        return None if v is None else _normalize_request_config(v)


class SearchEntry(_SiteModel):
    """Declarative description of how to search one site."""

    request_config: dict[str, Any] = Field(default_factory=dict)
    keyword_path: str = DEFAULT_KEYWORD_PATH
    advance_keyword_params: dict[str, AdvanceKeywordConfig | bool] = Field(
        default_factory=dict
    )
    selectors: dict[str, Any] = Field(default_factory=dict)
    request_config_transformer: Callable[..., Any] | None = None
    merge: bool | None = None

    @field_validator("request_config", mode="before")
    @classmethod
    def _validate_request_config(cls, v: Any) -> Any:
        return _normalize_request_config(v)

    @field_validator("advance_keyword_params", mode="before")
    @classmethod
    def _validate_advance_keyword_params(cls, v: Any) -> Any:
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError("advance_keyword_params must be a mapping")
        # ``true`` means "enabled, no overrides"
        return {k: ({} if c is True else c) for k, c in v.items()}

    @field_validator("selectors", mode="before")
    @classmethod
    def _validate_selectors(cls, v: Any) -> dict[str, Any]:
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError("selectors must be a mapping")

        out: dict[str, Any] = {}
        for key, query in v.items():
            name = to_snake(key)
            if query is None:
                continue
            if name == "rows":
                out[name] = (
                    query
                    if isinstance(query, RowsQuery)
                    else RowsQuery.model_validate(_shorthand_query(query))
                )
            elif name == "tags":
                out[name] = [
                    t if isinstance(t, TagQuery) else TagQuery.model_validate(t)
                    for t in query
                ]
            else:
                out[name] = (
                    query
                    if isinstance(query, ElementQuery)
                    else ElementQuery.model_validate(_shorthand_query(query))
                )
        return out

    @property
    def rows(self) -> RowsQuery | None:
        return self.selectors.get("rows")

    @property
    def tags(self) -> list[TagQuery] | None:
        return self.selectors.get("tags")

    def field_query(self, name: str) -> ElementQuery | None:
        query = self.selectors.get(name)
        return query if isinstance(query, ElementQuery) else None

    def declared_fields(self) -> list[str]:
        """Selector keys other than ``rows``, in declaration order."""
        return [key for key in self.selectors if key != "rows"]


class DetailEntry(_SiteModel):
    """How to fetch and read a torrent's detail page."""

    request_config: dict[str, Any] = Field(default_factory=dict)
    selectors: dict[str, ElementQuery] = Field(default_factory=dict)

    @field_validator("request_config", mode="before")
    @classmethod
    def _validate_request_config(cls, v: Any) -> Any:
        return _normalize_request_config(v)

    @field_validator("selectors", mode="before")
    @classmethod
    def _validate_selectors(cls, v: Any) -> Any:
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError("selectors must be a mapping")
        return {to_snake(k): _shorthand_query(q) for k, q in v.items()}


class SiteMetadata(_SiteModel):
    """Site definition as shipped by the catalogue."""

    id: str = ""
    name: str = ""
    urls: list[str] = Field(default_factory=list)
    timezone_offset: str = "+0000"
    search: SearchEntry | None = None
    detail: DetailEntry | None = None

    @field_validator("timezone_offset")
    @classmethod
    def _validate_timezone_offset(cls, v: str) -> str:
        parse_timezone_offset(v)
        return v


class SiteUserConfig(_SiteModel):
    """Per-user overrides applied when a site instance is built."""

    url: str | None = None
    is_offline: bool = False
    allow_search: bool | None = None
    merge: dict[str, Any] = Field(default_factory=dict)


def _merge_values(old: Any, new: Any) -> Any:
    if isinstance(old, BaseModel) and isinstance(new, type(old)):
        return merge_models(old, new)
    if isinstance(old, dict) and isinstance(new, dict):
        merged = dict(old)
        for key, value in new.items():
            merged[key] = _merge_values(merged[key], value) if key in merged else value
        return merged
    return new


def merge_models(base: M, override: M | Mapping[str, Any]) -> M:
    """Merge *override* over *base*, field by field.

    Only fields explicitly set on *override* take part.  Nested models and
    dicts merge recursively; lists and scalars are replaced.
    """
    if isinstance(override, Mapping):
        override = type(base).model_validate(override)

    update = {
        name: _merge_values(getattr(base, name), getattr(override, name))
        for name in override.model_fields_set
    }
    return base.model_copy(update=update)
