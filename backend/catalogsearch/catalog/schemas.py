"""Pydantic schemas for the catalog and search endpoints"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class ProductResponse(BaseModel):
    """Product as shown in the storefront (imageUrl is '' when there is no image)"""
    id: int
    name: str
    description: str
    image_url: str = Field("", serialization_alias="imageUrl")

    @field_validator("image_url", mode="before")
    @classmethod
    def empty_image_url(cls, v: Optional[str]) -> str:
        return v or ""

    class Config:
        from_attributes = True


class SearchParamsEcho(BaseModel):
    """Effective parameters of a search request"""
    limit: int
    min_score: float = Field(..., serialization_alias="minScore")
    filter_category: Optional[str] = Field(None, serialization_alias="filterCategory")


class SearchMeta(BaseModel):
    query: str
    total_results: int = Field(..., serialization_alias="totalResults")
    search_params: SearchParamsEcho = Field(..., serialization_alias="searchParams")


class SearchResponse(BaseModel):
    """Search results (each with its debug block) plus request metadata"""
    results: list[dict[str, Any]]
    meta: SearchMeta
