from typing import Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SessionProvider(str, Enum):
    """Supported session providers"""

    BETTER_AUTH = "better_auth"


class SessionUser(BaseModel):
    """User attached to an auth session"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    email_verified: Optional[bool] = None


class SessionInfo(BaseModel):
    """Session record metadata"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: Optional[str] = None
    user_id: Optional[str] = None
    expires_at: Optional[datetime] = None


class Session(BaseModel):
    """Resolved auth session: {session, user}"""

    session: Optional[SessionInfo] = None
    user: SessionUser
