from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import HTTPException
from starlette import status
from models.users import User
from schemas.auth_schemas import CreateUserRequest
from utils.hashing import hash_password, verify_password
from utils.logger import get_logger

logger = get_logger(__name__)


class AuthService:

    @staticmethod
    def create_user(request: CreateUserRequest, db: Session) -> User:
        """
        Register a shopper account. Email and username must both be free.
        """
        existing = db.query(User).filter(
            or_(User.email == request.email, User.username == request.username)
        ).first()

        if existing:
            field = "Email" if existing.email == request.email else "Username"
            logger.warning(
                "Registration attempt with taken credentials",
                extra={"email": request.email, "username": request.username}
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail=f"{field} already registered")

        user = User(
            email=request.email,
            username=request.username,
            full_name=request.full_name,
            phone_number=request.phone_number,
            address=request.address,
            hashed_password=hash_password(request.password)
        )

        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def authenticate_user(login: str, password: str, db: Session) -> User:
        """
        `login` may be the email or the username. Every failure gets the
        same 401 so callers cannot probe which accounts exist.
        """
        login = login.strip()
        user = db.query(User).filter(
            or_(User.email == login.lower(), User.username == login)
        ).first()

        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            logger.warning("Login failed", extra={"login": login, "user_found": user is not None})
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                                detail="Could not validate user.")

        logger.debug("User authenticated successfully", extra={"user_id": user.id})
        return user

    @staticmethod
    def get_active_user_by_id(db: Session, user_id: int) -> User | None:
        return db.query(User).filter(User.id == user_id, User.is_active == True).one_or_none()
