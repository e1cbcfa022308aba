from studio_dashboard.schemas.hr.salary_schema import SalaryPayment
from studio_dashboard.services.base_service import ResourceService


class SalaryService(ResourceService[SalaryPayment]):
    endpoint = "salaries"
    model = SalaryPayment
