import logging
from functools import cached_property

from library_api.errors import ConflictError, ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, gateway, database, credentials):
        self.gateway = gateway
        self.database = database
        self.credentials = credentials

    @cached_property
    def dummy_credential(self):
        # checked against for unknown emails so both failures cost one hash
        return self.credentials.hash("no-such-account")

    def sign_up(self, name, email, password, role):
        with self.database.atomic_transaction():
            if self.gateway.get_user_by_email(email) is not None:
                raise ConflictError("User with this email already exists")
            user = self.gateway.create_user(name, email, self.credentials.hash(password), role)
        logger.info("Registered user %s as %s", user.id, role)
        return user

    def sign_in(self, email, password):
        """Return ``(user, token)``; the same error covers an unknown email and a wrong password."""
        user = self.gateway.get_user_by_email(email)
        credential = user.password if user is not None else self.dummy_credential
        matches = self.credentials.verify(password, credential)
        if user is None or not matches:
            logger.warning("Failed sign-in attempt")
            raise UnauthorizedError("Invalid credentials")
        if user.blocked:
            raise ForbiddenError("Your account is blocked. Please contact the librarian.")
        token = self.credentials.issue(user.id, user.email, user.role)
        return user, token
