from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.auth.models.domain.customer_details import CustomerDetails

__all__ = [
    "AuthenticatedUser",
    "CustomerDetails",
]
