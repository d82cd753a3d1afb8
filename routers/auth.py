from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from starlette import status
from middleware.rate_limiter import limiter
from schemas.auth_schemas import Token, CreateUserRequest, RefreshTokenRequest, UserResponse
from services.auth_service import AuthService
from services.token_service import TokenService
from utils.deps import db_dependency
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
async def create_user(request: Request, body: CreateUserRequest, db: db_dependency):
    user = AuthService.create_user(body, db)

    logger.info("User registered", extra={"user_id": user.id, "email": user.email})

    return user


@router.post("/token", response_model=Token)
@limiter.limit("5/minute")
async def login_for_access_token(request: Request, db: db_dependency,
                                 form_data: OAuth2PasswordRequestForm = Depends()):
    """
    OAuth2 password login; `username` may be the account email or username.
    """
    user = AuthService.authenticate_user(form_data.username, form_data.password, db)
    tokens = TokenService.issue_tokens(user, db)

    logger.info("User logged in", extra={"user_id": user.id})

    return tokens


@router.post("/refresh", response_model=Token)
@limiter.limit("10/minute")
async def refresh_token(request: Request, body: RefreshTokenRequest, db: db_dependency):
    tokens = TokenService.rotate(body.refresh_token, db)

    logger.info("Access token refreshed")

    return tokens


@router.post("/logout", status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def logout(request: Request, body: RefreshTokenRequest, db: db_dependency):
    revoked = TokenService.revoke(body.refresh_token, db)

    logger.info("User logged out", extra={"token_revoked": revoked})

    return {"message": "Logged out successfully"}
