"""GitHub portfolio sync."""

from datetime import datetime, timezone
from typing import Any

import httpx

from skill_sprint.core.config import get_settings
from skill_sprint.core.logging import get_logger
from skill_sprint.schemas.state import Portfolio, PortfolioItem

logger = get_logger(__name__)

MAX_LIMIT = 30


class PortfolioSyncError(RuntimeError):
    """Fetching the portfolio from the provider failed."""

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code


def normalize_repository(repo: dict[str, Any]) -> PortfolioItem:
    """Map a GitHub repository payload to a portfolio item."""
    full_name = repo.get("full_name") or repo.get("name") or ""
    topics = repo.get("topics") if isinstance(repo.get("topics"), list) else []
    return PortfolioItem(
        id=f"github:{full_name}",
        type="repository",
        title=repo.get("name") or full_name,
        description=(repo.get("description") or "").strip(),
        url=repo.get("html_url") or "",
        repo=full_name,
        stars=max(int(repo.get("stargazers_count") or 0), 0),
        language=repo.get("language") or None,
        topics=[str(topic) for topic in topics if topic],
        updated_at=repo.get("pushed_at") or repo.get("updated_at"),
    )


def select_repositories(
    repos: list[dict[str, Any]], limit: int, allow: list[str] | None = None
) -> list[PortfolioItem]:
    """Skip forks and archived repos, apply the allow-list, cap to ``limit``."""
    wanted = {name.lower() for name in allow} if allow else None
    items = []
    for repo in repos:
        if not isinstance(repo, dict) or repo.get("fork") or repo.get("archived"):
            continue
        if wanted is not None:
            names = {str(repo.get("name", "")).lower(), str(repo.get("full_name", "")).lower()}
            if not names & wanted:
                continue
        items.append(normalize_repository(repo))
        if len(items) >= limit:
            break
    return items


async def sync_github_portfolio(
    username: str,
    token: str | None = None,
    limit: int | None = None,
    repos: list[str] | None = None,
    client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
) -> Portfolio:
    """Fetch a user's public repositories and normalize them.

    Args:
        username: GitHub login.
        token: Optional personal access token (falls back to GITHUB_TOKEN).
        limit: Maximum number of items, 1..30 (defaults to PORTFOLIO_LIMIT).
        repos: Optional allow-list of repository names.
        client: Injected HTTP client (tests use a MockTransport).
        now: Sync timestamp.

    Raises:
        PortfolioSyncError: Unknown user (404) or any upstream failure (502).
    """
    settings = get_settings()
    limit = min(max(limit or settings.PORTFOLIO_LIMIT, 1), MAX_LIMIT)
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    auth_token = token or settings.GITHUB_TOKEN
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"

    # over-fetch so skipped forks do not shrink the result below the limit
    params = {"sort": "updated", "per_page": min(limit * 3, 100)}
    url = f"{settings.GITHUB_API_BASE_URL.rstrip('/')}/users/{username}/repos"

    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=settings.PORTFOLIO_TIMEOUT)
    try:
        resp = await http.get(url, headers=headers, params=params)
    except httpx.HTTPError as e:
        logger.error("GitHub request failed", username=username, error=str(e))
        raise PortfolioSyncError(f"GitHub request failed: {e}") from e
    finally:
        if owns_client:
            await http.aclose()

    if resp.status_code == 404:
        raise PortfolioSyncError(f"GitHub user {username} not found", status_code=404)
    if resp.status_code != 200:
        logger.error("GitHub returned an error", username=username, status=resp.status_code)
        raise PortfolioSyncError(f"GitHub returned {resp.status_code}")

    try:
        payload = resp.json()
    except ValueError as e:
        logger.error("GitHub returned a non-JSON body", username=username)
        raise PortfolioSyncError("Unexpected GitHub response") from e
    if not isinstance(payload, list):
        raise PortfolioSyncError("Unexpected GitHub response")

    items = select_repositories(payload, limit, repos)
    logger.info("Portfolio synced", username=username, items=len(items))
    return Portfolio(
        provider="github",
        username=username,
        last_sync=now or datetime.now(timezone.utc),
        items=items,
    )
