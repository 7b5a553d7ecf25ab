"""Registration and login. Issues tokens that bind a user id for the core services."""
import logging
import re

from sqlalchemy import or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from prediction_arena.core.errors import (AlreadyExists, AuthenticationError,
                                          NotFound, ValidationError)
from prediction_arena.db.models import Role, User
from prediction_arena.db.sessions import unit_of_work
from prediction_arena.schemas import (AuthResponse, LoginRequest,
                                      RegisterRequest, TokenResponse,
                                      UserPublic)
from prediction_arena.security import (TokenIssuer, hash_password,
                                       verify_password)

logger = logging.getLogger(__name__)

# min 8 chars, upper, lower, digit and one special character
PASSWORD_RE = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!\-%*?&])[A-Za-z\d@$!\-%*?&]{8,}$"
)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AccountService:
    def __init__(
        self, engine: Engine, tokens: TokenIssuer, *, initial_points: int = 1000
    ) -> None:
        self._engine = engine
        self._tokens = tokens
        self._initial_points = initial_points

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            token=self._tokens.access_token(user.id),
            refresh_token=self._tokens.refresh_token(user.id),
            user=UserPublic.from_row(user),
        )

    def register(self, data: RegisterRequest) -> AuthResponse:
        """Create a user with the initial point balance.

        Email or wallet address is required, and a username always. A
        password given with an email must satisfy PASSWORD_RE.
        """
        email = _clean(data.email)
        wallet = _clean(data.wallet_address)
        username = _clean(data.username)
        if email is None and wallet is None:
            raise ValidationError("Email or wallet address required")
        if username is None:
            raise ValidationError("Username required")
        if email and data.password is not None and not PASSWORD_RE.match(data.password):
            raise ValidationError(
                "Password must be at least 8 characters with uppercase, lowercase, "
                "number, and special character (@$!%*?&-)"
            )
        if email and "@" not in email:
            raise ValidationError("Invalid email address")

        password_hash = hash_password(data.password) if email and data.password else None
        user = User(
            email=email.lower() if email else None,
            wallet_address=wallet,
            username=username,
            password_hash=password_hash,
            points=self._initial_points,
        )
        with unit_of_work(self._engine) as session:
            session.add(user)
            try:
                session.flush()
            except IntegrityError as exc:
                raise AlreadyExists("Email or wallet address already registered") from exc
            session.refresh(user)
        logger.info("User %s registered", user.id)
        return self._auth_response(user)

    def login(self, data: LoginRequest) -> AuthResponse:
        """Authenticate by wallet address, or by username/email plus password."""
        identifier = _clean(data.identifier)
        wallet = _clean(data.wallet_address)
        if identifier is None and wallet is None:
            raise ValidationError("Identifier (username/email) or wallet address required")
        use_wallet = wallet is not None and identifier is None

        with unit_of_work(self._engine) as session:
            if use_wallet:
                stmt = select(User).where(User.wallet_address == wallet)
            else:
                stmt = select(User).where(
                    or_(User.username == identifier, User.email == identifier.lower())
                ).order_by(User.id)
            user = session.exec(stmt).first()

        if user is None:
            raise NotFound("User")
        if not use_wallet:
            if not user.password_hash or not data.password:
                raise AuthenticationError("Invalid credentials")
            if not verify_password(data.password, user.password_hash):
                raise AuthenticationError("Invalid password")
        logger.info("User %s logged in", user.id)
        return self._auth_response(user)

    def refresh(self, refresh_token: str) -> TokenResponse:
        """Exchange a refresh token for a short-lived access token."""
        user_id = self._tokens.decode_refresh(refresh_token)
        return TokenResponse(token=self._tokens.access_token(user_id, short_lived=True))

    def get_user(self, user_id: int) -> User:
        with unit_of_work(self._engine) as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFound("User", user_id)
            return user

    def promote(self, email: str) -> User:
        """Grant the admin role to the user with this email."""
        with unit_of_work(self._engine) as session:
            user = session.exec(select(User).where(User.email == email.strip().lower())).first()
            if user is None:
                raise NotFound("User", email)
            user.role = Role.ADMIN.value
            session.add(user)
        logger.info("User %s promoted to admin", user.id)
        return user
