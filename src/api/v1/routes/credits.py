"""Credit ledger API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_ledger_service
from api.v1.schemas.credit import (
    BalanceResponse,
    CreditEntryResponse,
    CreditStatementResponse,
)
from core.rate_limit import READ_LIMIT, limiter
from domain.services.ledger_service import LedgerService

router = APIRouter(prefix="/credits", tags=["credits"])


@router.get(
    "",
    response_model=CreditStatementResponse,
    summary="List my ledger entries",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_statement(
    request: Request,
    user: CurrentUser,
    service: LedgerService = Depends(get_ledger_service),
) -> CreditStatementResponse:
    """Every credit the authenticated user earned or spent, newest first."""
    entries, balance = await service.get_statement(user.id)
    return CreditStatementResponse(
        data=[CreditEntryResponse.model_validate(e) for e in entries],
        meta={"total": len(entries), "balance": balance},
    )


@router.get(
    "/balance",
    response_model=BalanceResponse,
    summary="Get my balance",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_balance(
    request: Request,
    user: CurrentUser,
    service: LedgerService = Depends(get_ledger_service),
) -> BalanceResponse:
    """The sum of the authenticated user's ledger entries."""
    return BalanceResponse(balance=await service.get_balance(user.id))
