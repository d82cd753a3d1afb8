from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from jose import jwt, JWTError
from core.config import settings


def get_rate_limit_key(request: Request) -> str:
    """
    Signed-in shoppers are limited per account, everyone else per IP.
    """
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        try:
            payload = jwt.decode(authorization[len("Bearer "):], settings.SECRET_KEY,
                                 algorithms=[settings.ALGORITHM])
        except JWTError:
            payload = {}
        user_id = payload.get("id")
        if user_id:
            return f"user:{user_id}"

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=["200/hour"],
    enabled=not settings.is_testing
)
