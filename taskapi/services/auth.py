import logging

from taskapi.errors import Conflict, Unauthorized, ValidationError
from taskapi.schemas.user import AuthResponse, UserOut
from taskapi.stores.base import UserStore
from taskapi.utils.auth import TokenIssuer, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid credentials"


class AuthService:
    def __init__(self, users: UserStore, tokens: TokenIssuer):
        self.users = users
        self.tokens = tokens

    def register(self, email: str, password: str) -> AuthResponse:
        if self.users.get_by_email(email) is not None:
            raise Conflict("user already exists")

        try:
            hashed = hash_password(password)
        except ValueError as e:
            raise ValidationError(str(e))

        user = self.users.create(email, hashed)
        return self._respond(user)

    def login(self, email: str, password: str) -> AuthResponse:
        # same error for unknown email and wrong password
        user = self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.info("failed login attempt")
            raise Unauthorized(INVALID_CREDENTIALS)
        return self._respond(user)

    def _respond(self, user) -> AuthResponse:
        token = self.tokens.issue(user.id)
        return AuthResponse(token=token, user=UserOut.model_validate(user))
