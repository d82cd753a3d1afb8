import hashlib
import secrets
from datetime import datetime, timezone, timedelta
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from jose import jwt, JWTError
from core.config import settings
from models.refresh_tokens import RefreshToken
from models.users import User
from utils.logger import get_logger

logger = get_logger(__name__)

ACCESS = "access"
REFRESH = "refresh"


def _hash_jti(jti: str) -> str:
    return hashlib.sha256(jti.encode()).hexdigest()


class TokenService:
    """
    JWT access tokens plus database-tracked refresh tokens.

    Access tokens carry the user's email (`sub`), id and role. Refresh
    tokens additionally carry a random JTI whose hash is stored so the
    token can be rotated or revoked.
    """

    @staticmethod
    def _encode(user: User, token_type: str, expires_at: datetime, **claims) -> str:
        payload = {
            "sub": user.email,
            "id": user.id,
            "role": user.role,
            "type": token_type,
            "exp": expires_at,
            **claims
        }
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode(token: str, expected_type: str) -> dict:
        """
        Decode and check a token. Raises 401 on a bad signature, expiry,
        wrong type or missing claims.
        """
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                                detail="Could not validate credentials.")

        if payload.get("type") != expected_type:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                                detail=f"Invalid token type. {expected_type.capitalize()} token required.")

        if payload.get("sub") is None or payload.get("id") is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                                detail="Could not validate credentials.")

        return payload

    @staticmethod
    def issue_tokens(user: User, db: Session) -> dict:
        now = datetime.now(timezone.utc)
        access_token = TokenService._encode(
            user, ACCESS, now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )

        jti = secrets.token_urlsafe(32)
        refresh_expires_at = now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        refresh_token = TokenService._encode(user, REFRESH, refresh_expires_at, jti=jti)

        db.add(RefreshToken(user_id=user.id, jti_hash=_hash_jti(jti), expires_at=refresh_expires_at))
        db.commit()

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer"
        }

    @staticmethod
    def rotate(refresh_token: str, db: Session) -> dict:
        """
        Exchange a live refresh token for a new pair; the old one is
        revoked so it cannot be replayed.
        """
        payload = TokenService.decode(refresh_token, REFRESH)
        jti = payload.get("jti")
        if not jti:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")

        stored = db.query(RefreshToken).filter(
            RefreshToken.jti_hash == _hash_jti(jti),
            RefreshToken.revoked == False
        ).first()

        if not stored:
            logger.warning("Refresh rejected - token unknown or revoked", extra={"user_id": payload.get("id")})
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token not found or revoked")

        if stored.is_expired():
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")

        user = db.query(User).filter(User.id == stored.user_id).one_or_none()
        if not user or not user.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")

        stored.revoke()
        db.commit()

        return TokenService.issue_tokens(user, db)

    @staticmethod
    def revoke(refresh_token: str, db: Session) -> bool:
        """
        Logout. Returns False when the token was unreadable or unknown;
        logging out twice is not an error.
        """
        try:
            payload = jwt.decode(refresh_token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            logger.info("Logout with unreadable refresh token")
            return False

        jti = payload.get("jti")
        if not jti:
            return False

        stored = db.query(RefreshToken).filter(RefreshToken.jti_hash == _hash_jti(jti)).first()
        if not stored:
            return False

        stored.revoke()
        db.commit()
        return True
