"""
Storefront error taxonomy.

Services raise these directly; FastAPI turns them into
`{"detail": ...}` responses with the matching status code.
"""

from fastapi import HTTPException
from starlette import status


class InvalidInput(HTTPException):
    """Missing or malformed request fields."""

    def __init__(self, detail: str = "Missing required fields"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFound(HTTPException):
    """A referenced record does not exist."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class OutOfStock(HTTPException):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Product {product_id} is out of stock"
        )


class NoStockInfo(HTTPException):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Stock information not found for product {product_id}"
        )


class PersistenceFailure(HTTPException):
    """
    Database write/read failed. The underlying message is passed through
    so the client can report it.
    """

    def __init__(self, action: str, error: Exception | None = None):
        detail = f"Failed to {action}"
        if error is not None and str(error):
            detail = f"{detail}: {error}"
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
