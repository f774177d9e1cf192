"""Tests for the portfolio summarizer."""

from skill_sprint.insights import summarize_portfolio
from skill_sprint.schemas.state import PortfolioItem


def _item(name, language=None, stars=0, topics=()):
    return PortfolioItem(
        id=f"github:me/{name}", title=name, language=language, stars=stars, topics=list(topics)
    )


class TestSummarizePortfolio:
    def test_empty(self):
        assert summarize_portfolio([]) == {"totalItems": 0, "totalStars": 0, "topLanguages": []}

    def test_same_language_counts_twice(self):
        summary = summarize_portfolio([_item("a", "Go", 3), _item("b", "Go", 4)])
        assert summary["totalItems"] == 2
        assert summary["totalStars"] == 7
        assert summary["topLanguages"] == [{"language": "Go", "count": 2}]

    def test_topics_are_prefixed_and_weighted(self):
        items = [
            _item("a", "Python", topics=["python", "fastapi"]),
            _item("b", "Python", topics=["fastapi"]),
            _item("c", "Rust"),
        ]
        ranking = summarize_portfolio(items)["topLanguages"]
        assert ranking[0] == {"language": "Python", "count": 2}
        assert ranking[1] == {"language": "Rust", "count": 1}
        # 0.4 and 0.2 round down for display
        assert {"language": "#fastapi", "count": 0} in ranking
        assert {"language": "#python", "count": 0} in ranking

    def test_top_five_only(self):
        items = [_item(str(i), f"Lang{i}") for i in range(8)]
        assert len(summarize_portfolio(items)["topLanguages"]) == 5

    def test_items_without_language(self):
        summary = summarize_portfolio([_item("a", stars=2)])
        assert summary["topLanguages"] == []
        assert summary["totalStars"] == 2
