"""JWT identity provider.

Accepts Supabase-issued access tokens (ES256, verified against the project's
JWKS) and locally signed HS256 tokens (tests and tooling).

Supabase JWT payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "user_metadata": { "full_name": "Jane Doe" },
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
import structlog
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWKSCache:
    """Lazily fetched ``kid -> key`` map for the Supabase JWKS endpoint."""

    def __init__(self, url: str, timeout: float = 10.0) -> None:
        self._url = url
        self._timeout = timeout
        self._keys: dict[str, Any] | None = None

    def invalidate(self) -> None:
        self._keys = None

    async def get(self, kid: str) -> dict[str, Any] | None:
        """Look up a key, refetching once if it is unknown (key rotation)."""
        keys = await self._load()
        if kid not in keys:
            self.invalidate()
            keys = await self._load()
        return keys.get(kid)

    async def _load(self) -> dict[str, Any]:
        if self._keys is not None:
            return self._keys
        if not self._url:
            return {}

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self._url, timeout=self._timeout)
                response.raise_for_status()
                jwks_data = response.json()
        except httpx.HTTPError:
            logger.exception("jwks_fetch_failed", url=self._url)
            return {}

        self._keys = {
            key_data["kid"]: key_data
            for key_data in jwks_data.get("keys", [])
            if key_data.get("kid")
        }
        logger.info("jwks_fetched", key_count=len(self._keys))
        return self._keys


class JWTAuthProvider:
    """JWT-based identity provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        jwks: JWKSCache | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._jwks = jwks or JWKSCache(settings.supabase_jwks_url)

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the principal.

        The signing algorithm is taken from the token header: ES256 tokens
        are checked against JWKS, everything else against the shared secret.

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._decode_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None
        return self._to_user(payload)

    async def _decode_es256(self, token: str, header: dict) -> Optional[dict]:
        kid = header.get("kid")
        if not kid:
            return None

        key_data = await self._jwks.get(kid)
        if not key_data:
            logger.warning("jwks_key_not_found", kid=kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    @staticmethod
    def _to_user(payload: dict) -> Optional[TokenUser]:
        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            return None

        try:
            principal_id = UUID(user_id)
        except ValueError:
            return None

        user_metadata = payload.get("user_metadata") or {}
        display_name = (
            user_metadata.get("full_name")
            or user_metadata.get("display_name")
            or user_metadata.get("name")
        )

        return TokenUser(
            id=principal_id,
            email=email,
            display_name=display_name,
            role=payload.get("role"),
        )

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 token for ``user``."""
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": expire,
            "user_metadata": {
                "full_name": user.display_name,
            },
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
