"""Dashboard API router."""

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from contabilito.core.exceptions import (
    AuthorizationError, ResourceNotFoundError, forbidden, not_found,
)
from contabilito.core.security import get_current_user_id
from contabilito.db.session import get_store
from contabilito.db.store import CredentialStore
from contabilito.schemas.schemas import DashboardResponse
from contabilito.services.dashboard_service import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/{company_id}", response_model=DashboardResponse)
async def get_dashboard(
    company_id: int,
    store: CredentialStore = Depends(get_store),
    user_id: int = Depends(get_current_user_id),
):
    """Balance total and latest transactions for a company the caller belongs to."""
    try:
        data = await run_in_threadpool(dashboard_service.summary, store, company_id, user_id)
    except ResourceNotFoundError as e:
        raise not_found(e.message)
    except AuthorizationError as e:
        raise forbidden(e.message)
    return DashboardResponse(message="Dashboard data retrieved.", data=data)
