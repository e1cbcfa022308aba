from fastapi import APIRouter
from studio_dashboard.api.v1.endpoints.auth import login, register
from studio_dashboard.api.v1.endpoints.dashboard import calendar, dashboard
from studio_dashboard.api.v1.endpoints.finance import transactions
from studio_dashboard.api.v1.endpoints.hr import employees, salary
from studio_dashboard.api.v1.endpoints.notification import notifications
from studio_dashboard.api.v1.endpoints.studio import packages, partners, projects

api_router = APIRouter()

# Authentication routes
api_router.include_router(login.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(register.router, prefix="/auth", tags=["Authentication"])

# Dashboard routes
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(calendar.router, prefix="/calendar", tags=["Dashboard"])

# Studio routes
api_router.include_router(projects.router, prefix="/projects", tags=["Studio"])
api_router.include_router(packages.router, prefix="/packages", tags=["Studio"])
api_router.include_router(partners.router, prefix="/partners", tags=["Studio"])

# HR routes
api_router.include_router(employees.router, prefix="/employees", tags=["Human Resource"])
api_router.include_router(salary.router, prefix="/salaries", tags=["Human Resource"])

# Finance routes
api_router.include_router(transactions.router, prefix="/finance", tags=["Finance"])

# Notification routes
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
