from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from core.config import settings
from core.exceptions import InvalidInput, NotFound, OutOfStock, NoStockInfo, PersistenceFailure
from models.orders import Order
from models.order_items import OrderItem
from models.products import Product
from schemas.order_schemas import CreateOrderRequest, DirectOrderRequest, OrderItemInput
from services.stock_service import StockService
from utils.logger import get_logger, sanitize_log_data

logger = get_logger(__name__)


def _is_missing(value: Any) -> bool:
    """Absent, blank or zero counts as not provided."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return value == 0


def _item_is_invalid(item: OrderItemInput) -> bool:
    if any(_is_missing(v) for v in (item.product_id, item.quantity, item.price)):
        return True
    return item.quantity < 0 or item.price < 0


def compose_address(address: str, governorate: Optional[str]) -> str:
    """'Rue X' + 'Tunis' -> 'Rue X, Tunis'"""
    address = address.strip()
    if governorate and governorate.strip():
        return f"{address}, {governorate.strip()}"
    return address


CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    """Round to the 2 decimals the order tables store."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def expected_cart_total(items: list[OrderItemInput], shipping_fee: Decimal) -> Decimal:
    return to_cents(sum((item.price * item.quantity for item in items), Decimal("0")) + shipping_fee)


class OrderService:

    @staticmethod
    def _lookup(db: Session, product_id: int, with_stock: bool = True):
        """Product and first stock row for a checkout line."""
        try:
            product = db.get(Product, product_id)
            stock = StockService.first_stock_row(db, product_id, lock=True) if product and with_stock else None
        except SQLAlchemyError as e:
            logger.error("Checkout lookup failed", extra={"product_id": product_id, "error": str(e)}, exc_info=True)
            raise PersistenceFailure("validate order items", e)
        return product, stock

    @staticmethod
    def _check_cart_items(db: Session, items: list[OrderItemInput]):
        """
        Validate each line in turn: fields present, product exists, first
        stock row exists and is in stock. Stops at the first bad line.
        """
        for index, item in enumerate(items):
            if _item_is_invalid(item):
                logger.warning("Order rejected - invalid item", extra={"position": index, "item": item.model_dump(mode="json")})
                raise InvalidInput(
                    f"Invalid item data at position {index}: missing required fields (productId, quantity, price)"
                )

            product, stock = OrderService._lookup(db, item.product_id)
            if not product:
                logger.warning("Order rejected - product not found", extra={"product_id": item.product_id})
                raise NotFound(f"Product with ID {item.product_id} not found")

            if stock is None:
                logger.warning("Order rejected - no stock information", extra={"product_id": item.product_id})
                raise NoStockInfo(item.product_id)

            if not stock.in_stock:
                logger.warning("Order rejected - out of stock", extra={"product_id": item.product_id})
                raise OutOfStock(item.product_id)

    @staticmethod
    def _save(db: Session, order: Order) -> Order:
        try:
            db.add(order)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Order creation failed: {str(e)}",
                extra={"error_type": type(e).__name__},
                exc_info=True
            )
            raise PersistenceFailure("create order", e)

        db.refresh(order)
        return order

    @staticmethod
    def create_order(body: CreateOrderRequest, db: Session, user_id: Optional[int] = None) -> Order:
        """
        Cart checkout.

        Validation runs in a fixed order and the first failure is raised:
        customer fields, item list, then each item (fields, product,
        stock), then the submitted total against the item lines plus
        shipping. Nothing is written unless every check passes; the order
        and all its items are then committed together.
        """
        customer = {
            "customer_name": body.customer_name,
            "phone_number": body.phone_number,
            "address": body.address,
            "total_amount": body.total_amount,
        }
        if any(_is_missing(v) for v in customer.values()):
            logger.warning(
                "Order rejected - missing customer details",
                extra=sanitize_log_data({k: str(v) if v is not None else None for k, v in customer.items()})
            )
            raise InvalidInput("Missing required customer fields")

        if not body.items:
            logger.warning("Order rejected - empty item list")
            raise InvalidInput("Missing or invalid items array")

        try:
            OrderService._check_cart_items(db, body.items)
        except HTTPException:
            # release any stock row locks taken during validation
            db.rollback()
            raise

        if settings.VERIFY_ORDER_TOTAL:
            expected = expected_cart_total(body.items, settings.SHIPPING_FEE)
            if to_cents(body.total_amount) != expected:
                db.rollback()
                logger.warning(
                    "Order rejected - total mismatch",
                    extra={"submitted_total": str(body.total_amount), "expected_total": str(expected)}
                )
                raise InvalidInput(
                    f"Order total {body.total_amount} does not match items and shipping ({expected})"
                )

        order = Order(
            customer_name=body.customer_name.strip(),
            phone_number=body.phone_number.strip(),
            address=body.address.strip(),
            total_amount=to_cents(body.total_amount),
            status="PENDING",
            user_id=user_id,
            items=[
                OrderItem(product_id=item.product_id, quantity=item.quantity, price=item.price)
                for item in body.items
            ]
        )
        order = OrderService._save(db, order)

        logger.info(
            "Order created",
            extra={"order_id": order.id, "user_id": user_id, "item_count": len(order.items),
                   "total_amount": str(order.total_amount)}
        )
        return order

    @staticmethod
    def create_direct_order(body: DirectOrderRequest, db: Session, user_id: Optional[int] = None) -> Order:
        """
        Single-product express checkout. The total is computed here as
        price x quantity. Stock is only checked when
        CHECK_STOCK_ON_DIRECT_PURCHASE is enabled.
        """
        required = (body.full_name, body.phone, body.address, body.product_id, body.quantity, body.price)
        if any(_is_missing(v) for v in required):
            logger.warning("Direct order rejected - missing fields")
            raise InvalidInput("Missing required fields")

        if body.quantity < 0 or body.price < 0:
            raise InvalidInput("Quantity and price must be positive")

        product, _ = OrderService._lookup(db, body.product_id, with_stock=False)
        if not product:
            logger.warning("Direct order rejected - product not found", extra={"product_id": body.product_id})
            raise NotFound("Product not found")

        if settings.CHECK_STOCK_ON_DIRECT_PURCHASE:
            try:
                OrderService._check_cart_items(db, [
                    OrderItemInput(product_id=body.product_id, quantity=body.quantity, price=body.price)
                ])
            except HTTPException:
                db.rollback()
                raise

        order = Order(
            customer_name=body.full_name.strip(),
            phone_number=body.phone.strip(),
            address=compose_address(body.address, body.governorate),
            total_amount=to_cents(body.price * body.quantity),
            status="PENDING",
            user_id=user_id,
            items=[OrderItem(product_id=body.product_id, quantity=body.quantity, price=body.price)]
        )
        order = OrderService._save(db, order)

        logger.info(
            "Direct order created",
            extra={"order_id": order.id, "product_id": body.product_id, "user_id": user_id,
                   "total_amount": str(order.total_amount)}
        )
        return order

    @staticmethod
    def list_user_orders(db: Session, user_id: int) -> list[Order]:
        return (
            db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
