from studio_dashboard.schemas.studio.partner_schema import Partner
from studio_dashboard.services.base_service import ResourceService


class PartnerService(ResourceService[Partner]):
    endpoint = "partners"
    model = Partner
