# File: services/identity_service.py
import asyncio
import logging
from typing import Optional

import requests
from jose import JWTError, jwt
from requests.exceptions import RequestException

from services.errors import AuthError
from services.models import AuthenticatedUser

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class IdentityService:
    """
    Resolves a bearer token to a user identity.

    With a JWT secret configured the token is verified locally; otherwise it is
    introspected against the identity service's `/auth/v1/user` endpoint.
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        service_role_key: Optional[str] = None,
        jwt_secret: Optional[str] = None,
        expected_aud: Optional[str] = None,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        if not jwt_secret and not (supabase_url and service_role_key):
            raise ValueError(
                "Identity service not configured: set SUPABASE_JWT_SECRET or "
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
            )
        self.supabase_url = supabase_url.rstrip("/") if supabase_url else None
        self.service_role_key = service_role_key
        self.jwt_secret = jwt_secret
        self.expected_aud = expected_aud
        self.timeout = timeout
        self.session = session

    async def verify(self, token: str) -> AuthenticatedUser:
        if not token:
            raise AuthError("No token provided")
        if self.jwt_secret:
            return self._decode(token)
        return await asyncio.to_thread(self._introspect, token)

    def _decode(self, token: str) -> AuthenticatedUser:
        opts = {"verify_aud": bool(self.expected_aud)}
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[ALGORITHM],
                audience=self.expected_aud,
                options=opts,
            )
        except JWTError as e:
            logger.warning(f"Rejected token: {e}")
            raise AuthError("Invalid token") from e

        user_id = payload.get("sub")
        if not user_id:
            raise AuthError("Invalid token")
        return AuthenticatedUser(id=user_id, email=payload.get("email"), claims=payload)

    def _introspect(self, token: str) -> AuthenticatedUser:
        http = self.session or requests
        headers = {
            "Authorization": f"Bearer {token}",
            "apikey": self.service_role_key,
        }
        try:
            response = http.get(f"{self.supabase_url}/auth/v1/user", headers=headers, timeout=self.timeout)
        except RequestException as e:
            logger.error(f"Identity service request failed: {e}")
            raise AuthError("Authentication failed") from e

        if not response.ok:
            logger.warning(f"Identity service rejected token ({response.status_code})")
            raise AuthError("Invalid token")

        try:
            data = response.json()
        except ValueError as e:
            raise AuthError("Authentication failed") from e

        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            raise AuthError("Invalid token")
        return AuthenticatedUser(id=user_id, email=data.get("email"), claims=data)
