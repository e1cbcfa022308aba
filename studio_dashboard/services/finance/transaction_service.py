import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from studio_dashboard.client.http_client import ApiClient
from studio_dashboard.schemas.finance.transaction_schema import FinanceSummary, Transaction, TransactionType
from studio_dashboard.services.base_service import ResourceService

logger = logging.getLogger(__name__)


class FinanceService(ResourceService[Transaction]):
    """Finance transactions.

    The backend has no listing endpoint yet, so listing stays disabled
    (an empty result, no request) until FINANCE_API_ENABLED is set.
    """

    endpoint = "finance/transactions"
    model = Transaction

    def __init__(self, api: ApiClient, enabled: bool = False):
        super().__init__(api)
        self.enabled = enabled

    async def list(self, params: Optional[Dict[str, Any]] = None) -> List[Transaction]:
        if not self.enabled:
            logger.debug("Finance listing disabled, returning no transactions")
            return []
        return await super().list(params)

    @staticmethod
    def summarize(transactions: Sequence[Transaction]) -> FinanceSummary:
        income = sum((t.amount for t in transactions if t.type == TransactionType.INCOME), Decimal("0"))
        expense = sum((t.amount for t in transactions if t.type == TransactionType.EXPENSE), Decimal("0"))
        profit = income - expense
        margin = float(round(profit / income * 100, 2)) if income > 0 else 0.0
        return FinanceSummary(total_income=income, total_expense=expense, profit=profit, profit_margin=margin)
