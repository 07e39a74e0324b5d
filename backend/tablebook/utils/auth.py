import base64
import hashlib
import hmac
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Sequence

import jwt
from jwt import InvalidTokenError

_PBKDF2_ALGORITHM = "sha256"
_PBKDF2_ITERATIONS = 390_000


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    jti: str
    expires_at: datetime


def hash_password(password: str, *, iterations: int = _PBKDF2_ITERATIONS) -> str:
    """Return `pbkdf2_sha256$<iterations>$<salt>$<digest>`."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(_PBKDF2_ALGORITHM, password.encode(), salt.encode(), iterations)
    encoded = base64.b64encode(digest).decode("ascii")
    return f"pbkdf2_{_PBKDF2_ALGORITHM}${iterations}${salt}${encoded}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        scheme, iterations, salt, encoded = password_hash.split("$")
        rounds = int(iterations)
    except ValueError:
        return False
    if scheme != f"pbkdf2_{_PBKDF2_ALGORITHM}":
        return False
    digest = hashlib.pbkdf2_hmac(_PBKDF2_ALGORITHM, password.encode(), salt.encode(), rounds)
    return hmac.compare_digest(base64.b64encode(digest).decode("ascii"), encoded)


def create_access_token(
    *,
    user_id: int,
    secret: str,
    algorithm: str = "HS256",
    expires_delta: timedelta | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=30))
    payload = {"sub": str(user_id), "jti": uuid.uuid4().hex, "iat": now, "exp": exp}
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(
    token: str,
    *,
    secret: str,
    algorithms: Sequence[str],
) -> TokenClaims:
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=list(algorithms),
            options={"require": ["sub", "jti", "exp"]},
        )
    except InvalidTokenError as exc:  # includes ExpiredSignatureError
        raise ValueError("invalid token") from exc

    sub = payload.get("sub")
    jti = payload.get("jti")
    if sub is None or jti is None:
        raise ValueError("token missing sub or jti")
    try:
        user_id = int(sub)
    except (TypeError, ValueError) as exc:
        raise ValueError("token sub is not an integer") from exc
    expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc).replace(tzinfo=None)
    return TokenClaims(user_id=user_id, jti=str(jti), expires_at=expires_at)
