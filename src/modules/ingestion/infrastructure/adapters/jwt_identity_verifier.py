import logging
import uuid
from typing import Optional

import jwt

from src.modules.ingestion.application.ports.identity_verifier_port import IdentityVerifierPort
from src.modules.ingestion.domain.errors import InvalidCredentials, MissingCredentials

logger = logging.getLogger(__name__)


def get_bearer_token(authorization: Optional[str]) -> str:
    """Extracts the token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        raise MissingCredentials("Couldn't find bearer token")

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise MissingCredentials("Malformed authorization header")
    return token


class JWTIdentityVerifier(IdentityVerifierPort):
    """
    Validates HMAC-signed access tokens. The `sub` claim carries the user id.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", issuer: Optional[str] = None):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer

    def verify(self, authorization: Optional[str]) -> str:
        token = get_bearer_token(authorization)

        options = {"require": ["sub", "exp"]}
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options=options,
            )
        except jwt.PyJWTError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise InvalidCredentials(f"Couldn't validate bearer token: {e}") from e

        try:
            return str(uuid.UUID(str(claims["sub"])))
        except ValueError as e:
            raise InvalidCredentials("Token subject is not a valid user id") from e
