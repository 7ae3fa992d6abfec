"""JWT verification for Supabase access tokens.

HS256 tokens are checked with the project's shared secret; RS256/ES256 tokens
with the matching key from the project's JWKS endpoint.
"""

from typing import Optional

import jwt

from sales_copilot.core.config import SupabaseSettings
from sales_copilot.core.jwks import JWKSService
from sales_copilot.schemas.auth import JWTClaims
from sales_copilot.utils.logging import get_logger

LOGGER = get_logger(__name__)

AUDIENCE = "authenticated"
REQUIRED_CLAIMS = ["sub", "exp", "iat", "iss"]
ASYMMETRIC_ALGORITHMS = ("RS256", "ES256")


class JWTVerifier:
    """Verifier for Supabase access tokens."""

    def __init__(
        self,
        supabase_url: str,
        jwt_secret: str = "",
        jwks_service: Optional[JWKSService] = None,
    ):
        """Initialize JWT verifier.

        Args:
            supabase_url: Supabase project URL for issuer validation
            jwt_secret: Shared secret for HS256 verification
            jwks_service: Key source for asymmetric tokens
        """
        self.supabase_url = supabase_url.rstrip("/")
        self.expected_issuer = f"{self.supabase_url}/auth/v1"
        self.jwt_secret = jwt_secret
        self.jwks_service = jwks_service

        LOGGER.info(f"JWT verifier initialized for issuer: {self.expected_issuer}")

    @classmethod
    def from_settings(cls, supabase_settings: SupabaseSettings) -> "JWTVerifier":
        return cls(
            supabase_url=supabase_settings.url,
            jwt_secret=supabase_settings.jwt_secret,
            jwks_service=JWKSService(
                supabase_url=supabase_settings.url,
                cache_ttl=supabase_settings.jwks_cache_ttl,
            ),
        )

    async def verify_token(self, token: str) -> JWTClaims:
        """Verify and decode an access token.

        Raises:
            jwt.InvalidTokenError: If the token is invalid, expired or cannot be verified
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg")

            if alg == "HS256":
                if not self.jwt_secret:
                    raise jwt.InvalidTokenError("HS256 token received but no JWT secret is configured")
                key = self.jwt_secret
            elif alg in ASYMMETRIC_ALGORITHMS:
                key = await self._resolve_public_key(header.get("kid"))
            else:
                raise jwt.InvalidTokenError(f"Unsupported algorithm: {alg}")

            payload = jwt.decode(
                token,
                key,
                algorithms=[alg],
                audience=AUDIENCE,
                issuer=self.expected_issuer,
                options={"require": REQUIRED_CLAIMS},
            )
            claims = JWTClaims(**payload)
            LOGGER.debug(f"Successfully verified token for user: {claims.sub}")
            return claims

        except jwt.ExpiredSignatureError as e:
            LOGGER.warning(f"Token expired: {e}")
            raise jwt.InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            LOGGER.warning(f"Invalid token: {e}")
            raise
        except (RuntimeError, ValueError) as e:
            LOGGER.error(f"Token verification failed: {e}")
            raise jwt.InvalidTokenError("Token verification failed") from e

    async def _resolve_public_key(self, kid: Optional[str]):
        if not kid:
            raise jwt.InvalidTokenError("JWT header missing 'kid' (key ID)")
        if self.jwks_service is None:
            raise jwt.InvalidTokenError("No JWKS source configured for asymmetric tokens")

        jwk_key = await self.jwks_service.get_key(kid)
        if jwk_key is None:
            raise jwt.InvalidTokenError(f"No matching key found for kid: {kid}")

        return jwt.PyJWK(jwk_key.model_dump(exclude_none=True)).key
