import logging

from fastapi import Depends, Request

from api.dependencies.services import ServiceContainer, get_services
from services.errors import AuthError
from services.models import AuthenticatedUser

logger = logging.getLogger(__name__)


async def get_current_user(
    request: Request,
    services: ServiceContainer = Depends(get_services),
) -> AuthenticatedUser:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise AuthError("No token provided")

    token = auth_header.split(" ", 1)[1].strip()
    try:
        return await services.identity.verify(token)
    except AuthError:
        raise
    except Exception as e:
        logger.error("Authentication failed", exc_info=True)
        raise AuthError("Authentication failed") from e
