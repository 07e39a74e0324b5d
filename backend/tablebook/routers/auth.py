from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_claims, get_current_user_id, get_session, get_token_config
from ..domain.errors import EmailAlreadyRegisteredError, InvalidCredentialsError, RegistrationError
from ..infrastructure.repositories import (
    SqlAlchemyProfileRepository,
    SqlAlchemyTokenRepository,
    SqlAlchemyUserRepository,
)
from ..schemas import CurrentSession, ProfileRead, SessionRead, SignInRequest, SignUpRequest
from ..usecases import auth as auth_usecase
from ..usecases.auth import TokenConfig
from ..utils.audit_log import emit_audit_log
from ..utils.auth import TokenClaims

router = APIRouter(prefix="", tags=["auth"])


@router.post("/auth/signup", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def sign_up(
    payload: SignUpRequest,
    session: AsyncSession = Depends(get_session),
    tokens: TokenConfig = Depends(get_token_config),
) -> SessionRead:
    user_repo = SqlAlchemyUserRepository(session)
    profile_repo = SqlAlchemyProfileRepository(session)
    async with session.begin():
        try:
            auth_session, _ = await auth_usecase.sign_up(
                user_repo,
                profile_repo,
                tokens,
                email=payload.email,
                password=payload.password,
                full_name=payload.full_name,
                phone=payload.phone,
            )
        except RegistrationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"errors": exc.errors},
            )
        except (EmailAlreadyRegisteredError, IntegrityError):
            # IntegrityError: a concurrent sign-up won the uq_users_email race.
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="email already registered")

    emit_audit_log(action="session.signed_up", initiator="user", user_id=auth_session.user.id)
    return SessionRead.from_session(session=auth_session)


@router.post("/auth/signin", response_model=SessionRead)
async def sign_in(
    payload: SignInRequest,
    session: AsyncSession = Depends(get_session),
    tokens: TokenConfig = Depends(get_token_config),
) -> SessionRead:
    user_repo = SqlAlchemyUserRepository(session)
    try:
        auth_session = await auth_usecase.sign_in(user_repo, tokens, email=payload.email, password=payload.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    emit_audit_log(action="session.signed_in", initiator="user", user_id=auth_session.user.id)
    return SessionRead.from_session(session=auth_session)


@router.post("/auth/signout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
) -> Response:
    token_repo = SqlAlchemyTokenRepository(session)
    async with session.begin():
        await auth_usecase.sign_out(token_repo, claims=claims)

    emit_audit_log(action="session.signed_out", initiator="user", user_id=claims.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/auth/session", response_model=CurrentSession)
async def current_session(
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> CurrentSession:
    user = await SqlAlchemyUserRepository(session).get(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="user not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentSession(user_id=user.id, email=user.email)


@router.get("/me/profile", response_model=ProfileRead)
async def get_my_profile(
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> ProfileRead:
    profile = await SqlAlchemyProfileRepository(session).get(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="profile not found")
    return ProfileRead.from_db(profile=profile)
