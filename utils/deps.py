from typing import Annotated, Optional
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from core.database import SessionLocal
from services.token_service import TokenService, ACCESS
from utils.logger import get_logger

logger = get_logger(__name__)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

db_dependency = Annotated[Session, Depends(get_db)]


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]):
    payload = TokenService.decode(token, ACCESS)
    return {"email": payload["sub"], "user_id": payload["id"], "user_role": payload.get("role")}

user_dependency = Annotated[dict, Depends(get_current_user)]


def get_optional_user_id(token: Annotated[Optional[str], Depends(optional_oauth2_scheme)]) -> Optional[int]:
    """
    Checkout works for guests too: a valid access token links the order
    to its user, anything else places it anonymously.
    """
    if not token:
        return None
    try:
        return TokenService.decode(token, ACCESS)["id"]
    except HTTPException as e:
        logger.info("Ignoring unusable token on guest endpoint", extra={"reason": e.detail})
        return None

optional_user_id_dependency = Annotated[Optional[int], Depends(get_optional_user_id)]
