# fleet_portal/schemas/search.py
from pydantic import BaseModel
from typing import Literal

ResultType = Literal["vehicle", "booking", "user", "service-record"]


class SearchResult(BaseModel):
    id: str
    type: ResultType
    title: str
    subtitle: str = ""
    url: str


class SearchResponse(BaseModel):
    term: str
    total: int
    results: list[SearchResult]
    groups: dict[str, list[SearchResult]]   # same results, keyed by type for display
