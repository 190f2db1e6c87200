"""Response schemas for global search."""

from pydantic import BaseModel, Field


class GlobalSearchItem(BaseModel):
    """A single search hit, shaped for display."""

    id: str
    title: str
    subtitle: str
    href: str
    score: float = 0.0


class GlobalSearchResults(BaseModel):
    """Search hits grouped by entity kind."""

    recipes: list[GlobalSearchItem] = Field(default_factory=list)
    cupboard: list[GlobalSearchItem] = Field(default_factory=list)
    receipts: list[GlobalSearchItem] = Field(default_factory=list)


class GlobalSearchResponse(BaseModel):
    """Grouped search results for one query."""

    query: str
    results: GlobalSearchResults = Field(default_factory=GlobalSearchResults)
    total: int = 0
    used_trigram: bool = False
