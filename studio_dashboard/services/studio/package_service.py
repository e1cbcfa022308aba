from studio_dashboard.schemas.studio.package_schema import Package
from studio_dashboard.services.base_service import ResourceService


class PackageService(ResourceService[Package]):
    endpoint = "packages"
    model = Package
