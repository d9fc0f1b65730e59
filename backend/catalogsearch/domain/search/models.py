"""Search domain models.

Plain dataclasses shared by ingestion, search, the vector store adapters and
the chat tools. Nothing here touches the network or the database.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Keys with a dedicated ProductMetadata field; anything else is an extra attribute
_KNOWN_METADATA_KEYS = {"id", "name", "description", "imageUrl", "popularity", "rating"}


@dataclass
class ProductMetadata:
    """Metadata stored next to every product vector.

    Fixed fields cover what the storefront renders; free-form attributes
    (category, brand, ...) live in `extra` and are flattened into the stored
    JSON so exact-match filters can address them by key.

    Attributes:
        id: Product id (weak reference to product.id)
        name: Product name
        description: Product description
        image_url: Public image URL ('' when the product has no image)
        popularity: Optional ranking hint carried through to results
        rating: Optional ranking hint carried through to results
        extra: Additional attributes
    """
    id: Optional[int]
    name: str
    description: str
    image_url: str = ""
    popularity: Optional[float] = None
    rating: Optional[float] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        data.update({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "imageUrl": self.image_url,
        })
        if self.popularity is not None:
            data["popularity"] = self.popularity
        if self.rating is not None:
            data["rating"] = self.rating
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductMetadata":
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            description=data.get("description", ""),
            image_url=data.get("imageUrl") or "",
            popularity=data.get("popularity"),
            rating=data.get("rating"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_METADATA_KEYS},
        )


@dataclass
class ProductInput:
    """Product fields needed for ingestion.

    Attributes:
        id: Product id assigned by catalog storage
        name: Product name (required, non-blank)
        description: Product description (required, non-blank)
        image_url: Optional public image URL
        attributes: Optional extra metadata (category, popularity, rating, ...)
    """
    id: Optional[int]
    name: str
    description: str
    image_url: Optional[str] = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class VectorRecord:
    """One row to be written into the vector store."""
    content: str
    embedding: list[float]
    metadata: ProductMetadata


@dataclass
class SearchResult:
    """One ranked search hit.

    similarity is the raw cosine similarity returned by the vector store and
    relevance_score is that value rescaled to an integer percentage.
    """
    id: Optional[int]
    name: str
    description: str
    image_url: str
    relevance_score: int
    similarity: float
    popularity: Optional[float] = None
    rating: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "imageUrl": self.image_url,
            "relevanceScore": self.relevance_score,
            "similarity": self.similarity,
        }
        if self.popularity:
            data["popularity"] = self.popularity
        if self.rating:
            data["rating"] = self.rating
        return data


@dataclass
class SearchError:
    """Why a search could not be answered."""
    reason: str
    error_type: str


@dataclass
class SearchOutcome:
    """Result of a semantic search: ranked hits, or the failure that prevented them.

    results is always a list (empty on failure), so callers that do not care
    about the distinction can read it directly.
    """
    results: list[SearchResult] = field(default_factory=list)
    error: Optional[SearchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, exc: Exception) -> "SearchOutcome":
        return cls(results=[], error=SearchError(reason=str(exc), error_type=type(exc).__name__))


@dataclass
class IngestionResult:
    """Outcome of an embedding ingestion call."""
    success: bool
    records_written: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        if self.error is not None:
            data["error"] = self.error
        return data
