"""Common FastAPI dependencies for consistent type annotations.

Usage:
    from users_api.deps import UserGatewayDep

    async def my_endpoint(gateway: UserGatewayDep):
        # gateway is a UserGateway bound to a request-scoped session
        ...
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.database import get_db
from users_api.services.user_gateway import UserGateway

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_user_gateway(db: DbSession) -> UserGateway:
    """Bind the users gateway to the request's pooled session."""
    return UserGateway(db)


UserGatewayDep = Annotated[UserGateway, Depends(get_user_gateway)]

__all__ = ["DbSession", "UserGatewayDep", "get_user_gateway"]
