"""
Shopper cart with pluggable persistence.

The store keeps the lines in memory and writes the whole snapshot back
to its storage after every change, so a fresh store built on the same
storage picks up where the previous one left off.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Protocol
from pydantic import ValidationError
from core.config import settings
from schemas.cart_schemas import CartLine, cart_snapshot
from schemas.order_schemas import CreateOrderRequest, OrderItemInput
from utils.logger import get_logger

logger = get_logger(__name__)


class CartStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class MemoryCartStorage:
    """Dict-backed storage, one value per key."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FileCartStorage:
    """Stores each key as `<directory>/<key>.json`."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self._path(key).write_text(value, encoding="utf-8")

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class CartStore:

    def __init__(self, storage: CartStorage, key: Optional[str] = None):
        self.storage = storage
        self.key = key or settings.CART_STORAGE_KEY
        self._lines: list[CartLine] = self._load()

    def _load(self) -> list[CartLine]:
        try:
            raw = self.storage.get(self.key)
            if raw is None:
                return []
            lines = cart_snapshot.validate_json(raw)
        except (ValidationError, UnicodeDecodeError) as e:
            # A corrupt snapshot must never break the shopper's session
            logger.warning(
                "Discarding unreadable cart snapshot",
                extra={"storage_key": self.key, "error": str(e)}
            )
            self.storage.remove(self.key)
            return []

        return self._merge(lines)

    def _merge(self, lines: list[CartLine]) -> list[CartLine]:
        """
        Keep one line per product: repeated ids in a snapshot are folded
        into the first line and the cleaned snapshot is written back.
        """
        merged: dict[int, CartLine] = {}
        for line in lines:
            if line.id in merged:
                merged[line.id].quantity += line.quantity
            else:
                merged[line.id] = line

        if len(merged) != len(lines):
            logger.warning("Merged repeated lines in cart snapshot", extra={"storage_key": self.key})
            self._lines = list(merged.values())
            self._save()
        return list(merged.values())

    def _save(self) -> None:
        self.storage.set(self.key, cart_snapshot.dump_json(self._lines, by_alias=True).decode())

    def _find(self, product_id: int) -> Optional[CartLine]:
        return next((line for line in self._lines if line.id == product_id), None)

    @property
    def items(self) -> list[CartLine]:
        return list(self._lines)

    def add_item(self, product: Any) -> CartLine:
        """
        Add one unit of `product` (an ORM Product, a ProductResponse or a
        mapping with the same fields). A product already in the cart has
        its quantity bumped instead of getting a second line.
        """
        product_id = product["id"] if isinstance(product, dict) else product.id
        line = self._find(product_id)

        if line is not None:
            line.quantity += 1
        else:
            line = CartLine.model_validate(product)
            line.quantity = 1
            self._lines.append(line)

        self._save()
        return line

    def remove_item(self, product_id: int) -> None:
        self._lines = [line for line in self._lines if line.id != product_id]
        self._save()

    def update_quantity(self, product_id: int, quantity: int) -> None:
        # No clamping here, callers keep quantity >= 1
        line = self._find(product_id)
        if line is not None:
            line.quantity = quantity
        self._save()

    def clear_cart(self) -> None:
        self._lines = []
        self.storage.remove(self.key)

    @property
    def total_price(self) -> Decimal:
        return sum((line.line_total for line in self._lines), Decimal("0"))

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    def checkout_request(self, customer_name: str, phone_number: str, address: str,
                         shipping_fee: Optional[Decimal] = None) -> CreateOrderRequest:
        """
        Build the body for `POST /orders` from the current cart.
        Shipping is only charged when there is something to ship.
        """
        if shipping_fee is None:
            shipping_fee = settings.SHIPPING_FEE
        shipping = shipping_fee if self._lines else Decimal("0")

        return CreateOrderRequest(
            customer_name=customer_name,
            phone_number=phone_number,
            address=address,
            total_amount=self.total_price + shipping,
            items=[
                OrderItemInput(product_id=line.id, quantity=line.quantity, price=line.price)
                for line in self._lines
            ]
        )

    def __len__(self) -> int:
        return len(self._lines)
