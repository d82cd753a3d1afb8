from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Read from the environment (or `.env`). Only DATABASE_URL and
    SECRET_KEY have no default.
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "development"

    DATABASE_URL: str
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Auth
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Checkout
    SHIPPING_FEE: Decimal = Decimal("7.00")
    VERIFY_ORDER_TOTAL: bool = True
    CHECK_STOCK_ON_DIRECT_PURCHASE: bool = False
    CART_STORAGE_KEY: str = "cart"

    @property
    def is_testing(self) -> bool:
        return self.ENV == "testing"


settings = Settings()
