from datetime import datetime, timedelta, UTC
from typing import Optional

from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from taskapi.errors import Unauthorized
from taskapi.schemas.user import PASSWORD_MAX_BYTES

# truncate_error makes passlib refuse >72-byte secrets instead of silently
# comparing only their first 72 bytes
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__truncate_error=True)


def hash_password(password: str) -> str:
    """Hash a password after validating bcrypt's 72-byte limit.

    Raises ValueError if the UTF-8 encoding of the password exceeds 72 bytes.
    """
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        # make the failure explicit and consistent
        raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plaintext password against a hash in constant time.

    If verification raises a ValueError (for example plain >72 bytes or a
    malformed stored hash), return False so the caller responds with an
    authentication failure instead of an error.
    """
    if len(plain.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


class TokenIssuer:
    """Issues and validates signed, time-limited bearer tokens.

    The token subject is the user id as a string (JWT requires ``sub`` to be a
    string); ``exp`` is a Unix timestamp.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: float = 24 * 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: int, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(UTC)
        expire = now + timedelta(minutes=self.expire_minutes)
        claims = {"sub": str(user_id), "iat": int(now.timestamp()), "exp": int(expire.timestamp())}
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def validate(self, token: str) -> int:
        try:
            # jwt.decode checks exp and rejects any algorithm not listed
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise Unauthorized("token has expired")
        except JWTError:
            raise Unauthorized("invalid token")

        sub = payload.get("sub")
        if not sub or "exp" not in payload:
            raise Unauthorized("invalid token: missing claims")
        try:
            user_id = int(sub)
        except (TypeError, ValueError):
            raise Unauthorized("invalid token: bad subject")
        if user_id < 1:
            raise Unauthorized("invalid token: bad subject")
        return user_id
