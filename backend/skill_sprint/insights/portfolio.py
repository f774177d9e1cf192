"""Portfolio aggregate: stars and a weighted language / topic ranking."""

from collections.abc import Sequence

from skill_sprint.insights.utils import round_half_up
from skill_sprint.schemas.state import PortfolioItem

LANGUAGE_WEIGHT = 1.0
TOPIC_WEIGHT = 0.2
TOP_LANGUAGES = 5


def summarize_portfolio(items: Sequence[PortfolioItem]) -> dict:
    """Summarize synced portfolio items.

    Each item adds 1.0 to its primary language and 0.2 to each of its topics.
    Topics are keyed as ``#topic`` so they never collide with a language of the
    same name. Counts are rounded for display after ranking.
    """
    if not items:
        return {"totalItems": 0, "totalStars": 0, "topLanguages": []}

    weights: dict[str, float] = {}
    for item in items:
        if item.language:
            weights[item.language] = weights.get(item.language, 0.0) + LANGUAGE_WEIGHT
        for topic in item.topics:
            key = f"#{topic}"
            weights[key] = weights.get(key, 0.0) + TOPIC_WEIGHT

    ranked = sorted(weights.items(), key=lambda entry: entry[1], reverse=True)[:TOP_LANGUAGES]
    return {
        "totalItems": len(items),
        "totalStars": sum(item.stars or 0 for item in items),
        "topLanguages": [
            {"language": name, "count": round_half_up(weight)} for name, weight in ranked
        ],
    }
