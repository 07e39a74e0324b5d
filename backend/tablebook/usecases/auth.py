from dataclasses import dataclass
from datetime import timedelta

from ..domain.errors import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidSessionError,
    RegistrationError,
)
from ..domain.repositories import ProfileRepository, TokenRepository, UserRepository
from ..domain.validation import validate_email, validate_password, validate_phone_number
from ..models import Profile, User
from ..utils.auth import TokenClaims, create_access_token, decode_access_token, hash_password, verify_password

MSG_MISSING_FIELDS = "Please fill in all fields"
MSG_INVALID_EMAIL = "Please enter a valid email address"
MSG_SHORT_PASSWORD = "Password must be at least 6 characters"
MSG_INVALID_PHONE = "Please enter a valid phone number"


@dataclass(frozen=True)
class TokenConfig:
    secret: str
    algorithm: str = "HS256"
    expires_minutes: int = 60


@dataclass(frozen=True)
class AuthSession:
    user: User
    access_token: str
    expires_in: int


def registration_errors(*, email: str, password: str, full_name: str, phone: str) -> list[str]:
    if not email or not password or not full_name.strip() or not phone:
        return [MSG_MISSING_FIELDS]
    errors: list[str] = []
    if not validate_email(email):
        errors.append(MSG_INVALID_EMAIL)
    if not validate_password(password):
        errors.append(MSG_SHORT_PASSWORD)
    if not validate_phone_number(phone):
        errors.append(MSG_INVALID_PHONE)
    return errors


def _issue(user: User, tokens: TokenConfig) -> AuthSession:
    token = create_access_token(
        user_id=user.id,
        secret=tokens.secret,
        algorithm=tokens.algorithm,
        expires_delta=timedelta(minutes=tokens.expires_minutes),
    )
    return AuthSession(user=user, access_token=token, expires_in=tokens.expires_minutes * 60)


async def sign_up(
    user_repo: UserRepository,
    profile_repo: ProfileRepository,
    tokens: TokenConfig,
    *,
    email: str,
    password: str,
    full_name: str,
    phone: str,
) -> tuple[AuthSession, Profile]:
    email = email.strip().lower()
    errors = registration_errors(email=email, password=password, full_name=full_name, phone=phone)
    if errors:
        raise RegistrationError(errors)
    if await user_repo.get_by_email(email) is not None:
        raise EmailAlreadyRegisteredError("email already registered")

    user = await user_repo.create(email=email, password_hash=hash_password(password))
    profile = await profile_repo.create(
        user_id=user.id,
        email=email,
        full_name=full_name.strip(),
        phone=phone.strip(),
    )
    return _issue(user, tokens), profile


async def sign_in(
    user_repo: UserRepository,
    tokens: TokenConfig,
    *,
    email: str,
    password: str,
) -> AuthSession:
    user = await user_repo.get_by_email(email.strip().lower())
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("invalid email or password")
    return _issue(user, tokens)


async def get_session(
    token_repo: TokenRepository,
    tokens: TokenConfig,
    *,
    token: str,
) -> TokenClaims:
    """Resolve a bearer token. Expired, malformed or revoked tokens are no session."""
    try:
        claims = decode_access_token(token, secret=tokens.secret, algorithms=[tokens.algorithm])
    except ValueError as exc:
        raise InvalidSessionError(str(exc)) from exc
    if await token_repo.is_revoked(claims.jti):
        raise InvalidSessionError("session signed out")
    return claims


async def sign_out(token_repo: TokenRepository, *, claims: TokenClaims) -> None:
    await token_repo.revoke(jti=claims.jti, user_id=claims.user_id, expires_at=claims.expires_at)
