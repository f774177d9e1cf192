"""Portfolio routes."""

from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException

from skill_sprint.api.deps import DBSession, get_github_client
from skill_sprint.insights import summarize_portfolio
from skill_sprint.schemas.portfolio import PortfolioSyncRequest
from skill_sprint.schemas.state import Portfolio
from skill_sprint.services import state_service
from skill_sprint.services.portfolio_service import PortfolioSyncError, sync_github_portfolio

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


def _portfolio_response(portfolio: Portfolio) -> dict:
    document = portfolio.to_document()
    document["summary"] = summarize_portfolio(portfolio.items)
    return document


@router.get("")
async def get_portfolio(db: DBSession) -> dict:
    snapshot = await state_service.read_state(db)
    return _portfolio_response(snapshot.portfolio)


@router.post("/sync")
async def sync_portfolio(
    data: PortfolioSyncRequest,
    db: DBSession,
    client: Annotated[httpx.AsyncClient, Depends(get_github_client)],
) -> dict:
    """Fetch repositories from GitHub and replace the stored portfolio."""
    try:
        portfolio = await sync_github_portfolio(
            data.username,
            token=data.token,
            limit=data.limit,
            repos=data.repos,
            client=client,
        )
    except PortfolioSyncError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e

    snapshot = await state_service.update_portfolio(db, portfolio)
    return _portfolio_response(snapshot.portfolio)
