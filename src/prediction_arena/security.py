"""Password hashing and JWT issuance/verification."""
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from prediction_arena.core.errors import AuthenticationError, PermissionDenied

ACCESS = "access"
REFRESH = "refresh"

# pbkdf2_sha256 is pure Python in passlib; no native bcrypt build needed.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


class TokenIssuer:
    """Issues and decodes HS256 tokens binding a user id."""

    def __init__(
        self,
        secret: str,
        refresh_secret: str,
        *,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(days=7),
        refreshed_access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=30),
    ) -> None:
        self._secret = secret
        self._refresh_secret = refresh_secret
        self._algorithm = algorithm
        self._access_ttl = access_ttl
        self._refreshed_access_ttl = refreshed_access_ttl
        self._refresh_ttl = refresh_ttl

    def _encode(self, user_id: int, token_type: str, ttl: timedelta, secret: str) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "type": token_type,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(claims, secret, algorithm=self._algorithm)

    def access_token(self, user_id: int, *, short_lived: bool = False) -> str:
        ttl = self._refreshed_access_ttl if short_lived else self._access_ttl
        return self._encode(user_id, ACCESS, ttl, self._secret)

    def refresh_token(self, user_id: int) -> str:
        return self._encode(user_id, REFRESH, self._refresh_ttl, self._refresh_secret)

    def _decode(self, token: str, token_type: str, secret: str) -> int:
        try:
            claims = jwt.decode(token, secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except JWTError as exc:
            raise PermissionDenied("Invalid token") from exc
        if claims.get("type") != token_type:
            raise PermissionDenied("Invalid token")
        try:
            return int(claims["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise PermissionDenied("Invalid token") from exc

    def decode_access(self, token: str) -> int:
        """Return the user id bound to an access token."""
        return self._decode(token, ACCESS, self._secret)

    def decode_refresh(self, token: str) -> int:
        """Return the user id bound to a refresh token."""
        return self._decode(token, REFRESH, self._refresh_secret)
