from packages.auth.services.customer_details_service import CustomerDetailsService

__all__ = ["CustomerDetailsService"]
