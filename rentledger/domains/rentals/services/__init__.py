from rentledger.domains.rentals.services import (
    dashboard_service,
    expense_service,
    maintenance_service,
    payment_service,
    portal_service,
    property_service,
    tenant_service,
)

__all__ = [
    "dashboard_service",
    "expense_service",
    "maintenance_service",
    "payment_service",
    "portal_service",
    "property_service",
    "tenant_service",
]
