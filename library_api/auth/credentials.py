from dataclasses import dataclass
from datetime import timedelta

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from library_api.errors import UnauthorizedError
from library_api.models import Role
from library_api.utils import check_password, hash_password

TOKEN_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class Identity:
    user_id: int
    email: str
    role: Role


def identity_from_claims(claims) -> Identity:
    try:
        return Identity(
            user_id=int(claims["user_id"]),
            email=claims["email"],
            role=Role(claims["role"]),
        )
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedError("Invalid token claims") from None


class CredentialService:
    """Hashes and checks passwords, issues and validates signed session tokens."""

    def __init__(self, ttl=TOKEN_TTL):
        self.ttl = ttl

    def hash(self, secret):
        return hash_password(secret)

    def verify(self, secret, credential):
        return check_password(secret, credential)

    def issue(self, user_id, email, role, ttl=None):
        additional_claims = {"user_id": user_id, "email": email, "role": Role(role).value}
        return create_access_token(
            identity=str(user_id),
            additional_claims=additional_claims,
            expires_delta=ttl or self.ttl,
        )

    def validate(self, token) -> Identity:
        try:
            claims = decode_token(token)
        except (PyJWTError, JWTExtendedException) as e:
            raise UnauthorizedError("Invalid token") from e
        return identity_from_claims(claims)
