import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query

from studio_dashboard.api.dependencies import get_context, get_current_user, require_permission
from studio_dashboard.core.context import DashboardContext
from studio_dashboard.forms.transaction_form import TransactionForm
from studio_dashboard.schemas.auth.user import User
from studio_dashboard.schemas.common.pagination import ListPageResponse
from studio_dashboard.schemas.finance.transaction_schema import Transaction
from studio_dashboard.utils.data_exporter import SUM_COLUMNS, DataExportService
from studio_dashboard.views.filters import TransactionFilters

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/transactions", response_model=ListPageResponse[Transaction])
async def get_transactions(
    type: Optional[str] = Query(None, description="income or expense"),
    category: Optional[str] = Query(None),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Get transactions with the income/expense summary"""
    return await context.finance_page.load(TransactionFilters(type=type, category=category))


@router.post("/transactions", response_model=Dict[str, Any])
async def create_transaction(
    form_data: Dict[str, Any] = Body(...),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(require_permission("finance", "create"))
):
    """Record an income or expense"""
    form = TransactionForm(context.finance, context.notifier,
                           on_success=context.finance_page.reload_after_change)
    form.apply(form_data)
    return await form.submit()


@router.get("/export")
async def export_transactions(
    format: str = Query("excel", pattern="^(csv|excel)$"),
    type: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    context: DashboardContext = Depends(get_context),
    current_user: User = Depends(get_current_user)
):
    """Export the filtered transactions"""
    page = context.finance_page
    snapshot = await page.load(TransactionFilters(type=type, category=category))
    return DataExportService(SUM_COLUMNS).export(snapshot["items"], "transactions", format)
