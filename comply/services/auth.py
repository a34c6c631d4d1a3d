"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from comply.config import Settings, get_settings
from comply.exceptions import (
    DuplicateEmailError,
    InactiveAccountError,
    InvalidCredentialsError,
    NotFoundError,
)
from comply.models.enums import Role
from comply.models.user import User
from comply.schemas.auth import AuthResponse, TokenClaims, UserRegister, UserResponse

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Salted bcrypt hashing with a fixed cost factor."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__default_rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash. Malformed hashes never verify."""
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> None:
        """Spend the time of one verification without a real hash."""
        self._context.dummy_verify()


class TokenService:
    """Issues and verifies signed bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expiration_minutes: int = 1440):
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self._algorithm = algorithm
        self.expiration = timedelta(minutes=expiration_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiration_minutes=settings.jwt_expiration_minutes,
        )

    def create_access_token(
        self,
        user_id: str,
        email: str,
        role: Role | str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a JWT access token."""
        now = datetime.now(UTC)
        expire = now + (expires_delta if expires_delta is not None else self.expiration)
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "role": Role(role).value,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

    def decode_access_token(self, token: str) -> TokenClaims | None:
        """Decode and validate a JWT token.

        Returns None for any bad signature, expiry or malformed payload, without
        saying which check failed.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            return TokenClaims.model_validate(payload)
        except (JWTError, ValidationError):
            return None


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get the process-wide password hasher."""
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


@lru_cache
def get_token_service() -> TokenService:
    """Get the process-wide token service."""
    return TokenService.from_settings(get_settings())


def to_public_view(user: User) -> UserResponse:
    """Project a user onto the fields that may leave the system."""
    return UserResponse.model_validate(user)


class CredentialStore:
    """User persistence keyed by email."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: str) -> User:
        """Get a user by id."""
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: Role = Role.USER,
        is_active: bool = True,
    ) -> User:
        """Create a new user.

        The unique index on email decides concurrent registrations; the loser
        gets DuplicateEmailError.
        """
        user = User(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=is_active,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEmailError(email) from e
        self.db.refresh(user)
        return user


class AuthService:
    """Login, registration and profile flows."""

    def __init__(
        self,
        db: Session,
        hasher: PasswordHasher | None = None,
        tokens: TokenService | None = None,
    ):
        self.store = CredentialStore(db)
        self.hasher = hasher or get_password_hasher()
        self.tokens = tokens or get_token_service()

    def _issue(self, user: User) -> AuthResponse:
        access_token = self.tokens.create_access_token(user.id, user.email, user.role)
        return AuthResponse(access_token=access_token, user=to_public_view(user))

    def authenticate_user(self, email: str, password: str) -> User:
        """Authenticate a user by email and password."""
        user = self.store.get_by_email(email)
        if user is None:
            self.hasher.dummy_verify()
            logger.info("Login rejected: unknown account")
            raise InvalidCredentialsError()
        if not self.hasher.verify(password, user.password_hash):
            logger.info(f"Login rejected: bad password for user {user.id}")
            raise InvalidCredentialsError()
        if not user.is_active:
            logger.info(f"Login rejected: user {user.id} is inactive")
            raise InactiveAccountError()
        return user

    def login(self, email: str, password: str) -> AuthResponse:
        """Verify credentials and issue a token."""
        user = self.authenticate_user(email, password)
        logger.info(f"User {user.id} logged in")
        return self._issue(user)

    def register(self, data: UserRegister, role: Role = Role.USER) -> AuthResponse:
        """Create an account and log it in."""
        if self.store.get_by_email(data.email) is not None:
            raise DuplicateEmailError(data.email)
        user = self.store.create(
            email=data.email,
            password_hash=self.hasher.hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=role,
        )
        logger.info(f"Registered user {user.id} with role {user.role.value}")
        return self._issue(user)

    def get_profile(self, user_id: str) -> UserResponse:
        """Get the public view of a user."""
        return to_public_view(self.store.get_by_id(user_id))
