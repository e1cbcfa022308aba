from pydantic import BaseModel
from typing import Optional
from decimal import Decimal

from studio_dashboard.schemas.common.pagination import Money
from studio_dashboard.schemas.studio.project_schema import PartnerCosts, Surcharge, TeamInput


class PriceSplit(BaseModel):
    final_price: Money
    deposit: Money
    remaining: Money


class BonusPool(BaseModel):
    """Bonus paid to each member of a role group"""
    photographer: Money = Decimal("0")
    assistant: Money = Decimal("0")
    makeup: Money = Decimal("0")
    retouch: Money = Decimal("0")


class PackageSalaries(BaseModel):
    photographer: Money = Decimal("0")
    assistant: Money = Decimal("0")
    makeup: Money = Decimal("0")
    retouch: Money = Decimal("0")


class FinancialSummary(BaseModel):
    total_revenue: Money
    surcharge_revenue: Money
    total_labor_costs: Money
    partner_costs: Money
    total_costs: Money
    profit: Money
    profit_margin: float


class QuoteRequest(BaseModel):
    package_price: Money = Decimal("0")
    discount: Money = Decimal("0")
    surcharge: Surcharge = Surcharge()
    team: TeamInput = TeamInput()
    partners: PartnerCosts = PartnerCosts()
    package_id: Optional[str] = None


class QuoteResponse(BaseModel):
    split: PriceSplit
    bonuses: BonusPool
    team: TeamInput
    summary: FinancialSummary
