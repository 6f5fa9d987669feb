from pydantic import BaseModel


class CustomerDetails(BaseModel):
    """Contact details used when the billing platform creates a customer"""

    email: str
    name: str

    @classmethod
    def fallback(cls, external_id: str) -> "CustomerDetails":
        """Placeholder details for users whose profile cannot be resolved."""
        return cls(email=f"user_{external_id}@example.com", name="User")
