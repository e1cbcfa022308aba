"""Quote arithmetic for the project modal and the salary calculator.

Every amount is a whole number of dong. The figures are display hints for
the operator; the backend stays authoritative for what is stored.
"""
import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Union

from studio_dashboard.core.config import PricingRules
from studio_dashboard.schemas.studio.package_schema import PackageDetails
from studio_dashboard.schemas.studio.pricing_schema import BonusPool, FinancialSummary, PackageSalaries, PriceSplit
from studio_dashboard.schemas.studio.project_schema import PartnerCosts, Surcharge, TeamInput, TeamMemberInput

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
Number = Union[int, float, str, Decimal]


def to_decimal(value: Any) -> Decimal:
    """Lenient numeric coercion, blanks and garbage count as zero"""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO


def round_dong(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def price_split(package_price: Number, discount: Number, rules: PricingRules) -> PriceSplit:
    final_price = to_decimal(package_price) - to_decimal(discount)
    return PriceSplit(
        final_price=final_price,
        deposit=round_dong(final_price * rules.deposit_ratio),
        remaining=round_dong(final_price * (1 - rules.deposit_ratio)),
    )


def surcharge_revenue(surcharge: Surcharge, rules: PricingRules) -> Decimal:
    """What the customer pays on top of the package"""
    return (surcharge.extra_hours * rules.extra_hour_rate
            + surcharge.extra_people * rules.extra_person_rate
            + surcharge.extra_makeup * rules.extra_makeup_rate)


def surcharge_bonuses(surcharge: Surcharge, rules: PricingRules) -> BonusPool:
    """Per-member bonus of each role group for the extra work"""
    hours, people = surcharge.extra_hours, surcharge.extra_people
    return BonusPool(
        photographer=hours * rules.photo_bonus_per_hour + people * rules.photo_bonus_per_person,
        assistant=hours * rules.assist_bonus_per_hour + people * rules.assist_bonus_per_person,
        makeup=hours * rules.makeup_bonus_per_hour + people * rules.makeup_bonus_per_person,
        retouch=surcharge.extra_photos * rules.retouch_bonus_per_photo,
    )


def apply_bonuses(team: TeamInput, bonuses: BonusPool) -> TeamInput:
    def with_bonus(member: TeamMemberInput, bonus: Decimal) -> TeamMemberInput:
        return member.model_copy(update={"bonus": bonus})

    return TeamInput(
        main_photographer=with_bonus(team.main_photographer, bonuses.photographer),
        assistants=[with_bonus(m, bonuses.assistant) for m in team.assistants],
        makeup_artists=[with_bonus(m, bonuses.makeup) for m in team.makeup_artists],
        retouch_artists=[with_bonus(m, bonuses.retouch) for m in team.retouch_artists],
    )


_THOUSANDS_SUFFIX = re.compile(r"\s*k\s*$", re.IGNORECASE)


def _staff_rate(value: Optional[Union[Decimal, str]], rules: PricingRules) -> Decimal:
    # Package rates are written in thousands, "50k" and 50 both mean 50,000
    if isinstance(value, str):
        value = _THOUSANDS_SUFFIX.sub("", value)
    return to_decimal(value) * rules.package_rate_unit


def package_salaries(details: Optional[PackageDetails], rules: PricingRules) -> PackageSalaries:
    if details is None:
        return PackageSalaries()
    return PackageSalaries(
        photographer=_staff_rate(details.photo, rules),
        assistant=_staff_rate(details.assistant, rules),
        makeup=_staff_rate(details.makeup, rules),
        retouch=_staff_rate(details.retouch, rules),
    )


def apply_package_salaries(team: TeamInput, salaries: PackageSalaries) -> TeamInput:
    def with_salary(member: TeamMemberInput, salary: Decimal) -> TeamMemberInput:
        return member.model_copy(update={"salary": salary})

    main = team.main_photographer
    if main.employee_id:
        main = with_salary(main, salaries.photographer)
    return TeamInput(
        main_photographer=main,
        assistants=[with_salary(m, salaries.assistant) for m in team.assistants],
        makeup_artists=[with_salary(m, salaries.makeup) for m in team.makeup_artists],
        retouch_artists=[with_salary(m, salaries.retouch) for m in team.retouch_artists],
    )


def labor_cost(team: TeamInput) -> Decimal:
    members = list(team.assistants) + list(team.makeup_artists) + list(team.retouch_artists)
    if team.main_photographer.employee_id:
        members.append(team.main_photographer)
    return sum((m.salary + m.bonus for m in members), ZERO)


def financial_summary(
    final_price: Number,
    surcharge: Surcharge,
    team: TeamInput,
    partners: PartnerCosts,
    rules: PricingRules,
) -> FinancialSummary:
    extra = surcharge_revenue(surcharge, rules)
    revenue = to_decimal(final_price) + extra
    labor = labor_cost(team)
    partner_costs = partners.total_cost
    total_costs = labor + partner_costs
    profit = revenue - total_costs
    margin = float(round(profit / revenue * 100, 2)) if revenue > 0 else 0.0
    return FinancialSummary(
        total_revenue=revenue,
        surcharge_revenue=extra,
        total_labor_costs=labor,
        partner_costs=partner_costs,
        total_costs=total_costs,
        profit=profit,
        profit_margin=margin,
    )


def salary_total(base_salary: Number, project_salaries: Iterable[Number], bonus: Number, deduction: Number) -> Decimal:
    """Monthly pay: base + project pay + bonus - deduction"""
    projects = sum((to_decimal(s) for s in project_salaries), ZERO)
    return to_decimal(base_salary) + projects + to_decimal(bonus) - to_decimal(deduction)
