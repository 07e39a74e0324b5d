from datetime import date
from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings, get_settings
from .database import async_session
from .domain.errors import InvalidSessionError
from .infrastructure.repositories import SqlAlchemyTokenRepository
from .usecases import auth as auth_usecase
from .usecases.auth import TokenConfig
from .utils.auth import TokenClaims
from .utils.time import local_today, restaurant_zone

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session


def get_token_config(settings: Settings = Depends(get_settings)) -> TokenConfig:
    return TokenConfig(
        secret=settings.auth_secret,
        algorithm=settings.auth_algorithm,
        expires_minutes=settings.access_token_minutes,
    )


def get_today(settings: Settings = Depends(get_settings)) -> date:
    """Local date used for booking rules, sampled once per request."""
    return local_today(restaurant_zone(settings.restaurant_tz))


def _bearer_token(authorization: str | None) -> str:
    if authorization is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers=_BEARER_CHALLENGE,
        )
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bearer token required",
            headers=_BEARER_CHALLENGE,
        )
    return token.strip()


async def get_current_claims(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
    tokens: TokenConfig = Depends(get_token_config),
) -> TokenClaims:
    token = _bearer_token(authorization)
    try:
        return await auth_usecase.get_session(SqlAlchemyTokenRepository(session), tokens, token=token)
    except InvalidSessionError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers=_BEARER_CHALLENGE,
        ) from exc
    finally:
        # End the revocation read so routes can open their own `session.begin()`.
        await session.rollback()


async def get_current_user_id(claims: TokenClaims = Depends(get_current_claims)) -> int:
    return claims.user_id
