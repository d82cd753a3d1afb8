import os

# Must be set before the app (and its settings) are imported
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("LOG_DIR", "logs/test")

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from main import app
from core.database import Base
from models.products import Product
from models.product_images import ProductImage
from models.stocks import Stock
from models.users import User
from services.token_service import TokenService
from utils.deps import get_db
from utils.hashing import hash_password

# SYNC SQLite for testing (matches sync service layer)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

TEST_PASSWORD = "TestPassword123!"


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Fresh, empty database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
async def client(session: Session):
    """
    Async HTTP client talking to the app, with `get_db` pointed at the
    test session.
    """
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def customer(session: Session) -> User:
    user = User(
        email="shopper@example.com",
        username="shopper",
        full_name="Amira Ben Salah",
        phone_number="+21698123456",
        address="12 Rue de Marseille, Tunis",
        hashed_password=hash_password(TEST_PASSWORD),
        is_active=True
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def auth_headers(customer: User, session: Session) -> dict:
    tokens = TokenService.issue_tokens(customer, session)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def make_product(session: Session):
    """
    Factory for catalog products. `images` is a list of URLs (the first
    one is main) and `in_stock` adds a single stock row unless None.
    """
    counter = {"n": 0}
    base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _make(name="Robot Cuiseur", price="10.00", category="robot-cuiseur", in_stock=True,
              images=("https://cdn.example.com/front.jpg",), **fields) -> Product:
        counter["n"] += 1
        fields.setdefault("created_at", base_time + timedelta(minutes=counter["n"]))

        product = Product(
            name=name,
            description=f"{name} description",
            price=Decimal(price),
            category=category,
            **fields
        )
        product.images = [
            ProductImage(url=url, position="front" if i == 0 else "side", is_main=i == 0)
            for i, url in enumerate(images)
        ]
        if in_stock is not None:
            product.stocks = [Stock(size="M", color_id=1, in_stock=in_stock)]

        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make
