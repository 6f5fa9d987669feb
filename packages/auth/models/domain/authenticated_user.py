from typing import Optional
from pydantic import BaseModel


class AuthenticatedUser(BaseModel):
    """User context passed through authentication dependencies"""

    # Auth user id; doubles as the billing customer's external id
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None

    class Config:
        from_attributes = True
