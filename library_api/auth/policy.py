import logging
from functools import wraps

from flask_jwt_extended import get_jwt, verify_jwt_in_request

from library_api.auth.credentials import identity_from_claims
from library_api.errors import ForbiddenError
from library_api.models import Role

logger = logging.getLogger(__name__)

ANY_ROLE = frozenset(Role)


def roles_required(*roles):
    """
    Reject the request unless it carries a valid token whose role is in ``roles``.

    With no roles given any authenticated user passes. The check runs before the
    wrapped view, so a rejected request never reaches the borrowing rules.
    """
    allowed = frozenset(Role(role) for role in roles) or ANY_ROLE

    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            verify_jwt_in_request()
            identity = identity_from_claims(get_jwt())
            if identity.role not in allowed:
                logger.warning(
                    "User %s with role %s denied access to %s",
                    identity.user_id,
                    identity.role,
                    fn.__qualname__,
                )
                raise ForbiddenError("Access denied. Insufficient permissions.")
            return fn(*args, **kwargs)

        return decorator

    return wrapper


authenticated = roles_required()
librarian_required = roles_required(Role.LIBRARIAN)
