"""Unit tests for relevance scoring.

Covers the similarity -> relevance percentage rescale, the min_score
threshold, ordering and the debug block attached to results.
"""

import pytest

from catalogsearch.domain.search import (
    ProductMetadata,
    SearchResult,
    rank_neighbours,
    relevance_percentage,
    to_relevance_score,
    with_debug,
)


def _meta(product_id: int, name: str = "Product", **kwargs) -> ProductMetadata:
    return ProductMetadata(id=product_id, name=name, description=f"{name} description", **kwargs)


class TestRelevanceScore:
    """Similarity is rescaled to an integer percentage, rounding half up"""

    @pytest.mark.parametrize(
        "similarity,expected",
        [
            (0.82, 82),
            (1.0, 100),
            (0.0, 0),
            (0.125, 13),
            (0.625, 63),
            (0.6749, 67),
            (0.999, 100),
        ],
    )
    def test_rescale(self, similarity, expected):
        assert to_relevance_score(similarity) == expected

    def test_negative_similarity_is_not_clamped(self):
        assert to_relevance_score(-0.2) == -20

    def test_percentage_string(self):
        assert relevance_percentage(82) == "82%"


class TestRankNeighbours:
    """Threshold, ordering and limit applied to vector store neighbours"""

    def test_threshold_is_inclusive(self):
        results = rank_neighbours([(_meta(1), 0.70), (_meta(2), 0.694)], min_score=0.7)

        assert [r.id for r in results] == [1]
        assert results[0].relevance_score == 70

    def test_sorted_by_relevance_descending(self):
        neighbours = [(_meta(1), 0.41), (_meta(2), 0.93), (_meta(3), 0.67)]

        results = rank_neighbours(neighbours, min_score=0.0)

        assert [r.relevance_score for r in results] == [93, 67, 41]

    def test_equal_scores_keep_store_order(self):
        # 0.801 and 0.799 both round to 80
        neighbours = [(_meta(1), 0.801), (_meta(2), 0.799), (_meta(3), 0.95)]

        results = rank_neighbours(neighbours, min_score=0.0)

        assert [r.id for r in results] == [3, 1, 2]

    def test_limit_caps_results(self):
        neighbours = [(_meta(i), 0.9 - i * 0.01) for i in range(10)]

        results = rank_neighbours(neighbours, min_score=0.0, limit=3)

        assert len(results) == 3
        assert [r.id for r in results] == [0, 1, 2]

    def test_min_score_of_one_requires_perfect_match(self):
        results = rank_neighbours([(_meta(1), 0.98), (_meta(2), 0.9)], min_score=1.0)
        assert results == []

    def test_raw_similarity_carried_unchanged(self):
        results = rank_neighbours([(_meta(1, popularity=5, rating=4.5), 0.8234)], min_score=0.1)

        assert results[0].similarity == 0.8234
        assert results[0].relevance_score == 82
        assert results[0].popularity == 5
        assert results[0].rating == 4.5

    def test_empty_input(self):
        assert rank_neighbours([], min_score=0.1) == []


class TestResultSerialization:
    """Wire format of search results"""

    def test_to_dict_uses_storefront_keys(self):
        result = SearchResult(
            id=7,
            name="Blue Ceramic Mug",
            description="A sturdy hand-glazed mug",
            image_url="http://images.test/mug.png",
            relevance_score=82,
            similarity=0.82,
        )

        assert result.to_dict() == {
            "id": 7,
            "name": "Blue Ceramic Mug",
            "description": "A sturdy hand-glazed mug",
            "imageUrl": "http://images.test/mug.png",
            "relevanceScore": 82,
            "similarity": 0.82,
        }

    def test_popularity_and_rating_only_when_present(self):
        result = SearchResult(
            id=1, name="n", description="d", image_url="", relevance_score=50,
            similarity=0.5, popularity=12, rating=None,
        )

        data = result.to_dict()

        assert data["popularity"] == 12
        assert "rating" not in data

    def test_with_debug_adds_relevance_percentage(self):
        result = rank_neighbours([(_meta(1), 0.82)], min_score=0.1)[0]

        data = with_debug(result)

        assert data["debug"] == {"relevancePercentage": "82%"}
        assert data["relevanceScore"] == 82


class TestProductMetadata:
    """Metadata stored beside each vector"""

    def test_extras_are_flattened(self):
        meta = ProductMetadata(id=3, name="Mug", description="Mug", extra={"category": "kitchen"})

        data = meta.to_dict()

        assert data["category"] == "kitchen"
        assert data["imageUrl"] == ""
        assert "popularity" not in data

    def test_from_dict_collects_unknown_keys(self):
        meta = ProductMetadata.from_dict({
            "id": 3,
            "name": "Mug",
            "description": "Mug",
            "imageUrl": None,
            "rating": 4.0,
            "category": "kitchen",
            "similarity": 0.99,
        })

        assert meta.image_url == ""
        assert meta.rating == 4.0
        assert meta.extra == {"category": "kitchen", "similarity": 0.99}
