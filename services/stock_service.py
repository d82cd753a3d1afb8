from typing import Optional
from sqlalchemy.orm import Session
from models.stocks import Stock


class StockService:

    @staticmethod
    def list_stock(db: Session, product_id: int, size: Optional[str] = None,
                   color_id: Optional[int] = None) -> list[Stock]:
        """
        Raw stock rows for a product, narrowed by size and/or color when
        given. Interpreting availability is left to the caller.
        """
        query = db.query(Stock).filter(Stock.product_id == product_id)

        if size is not None:
            query = query.filter(Stock.size == size)

        if color_id is not None:
            query = query.filter(Stock.color_id == color_id)

        return query.order_by(Stock.id).all()

    @staticmethod
    def first_stock_row(db: Session, product_id: int, lock: bool = False) -> Optional[Stock]:
        """
        The row checkout looks at. With `lock`, the row is selected FOR
        UPDATE so concurrent checkouts of the same product queue up on it
        until the order transaction ends (no-op on SQLite).
        """
        query = db.query(Stock).filter(Stock.product_id == product_id).order_by(Stock.id)
        if lock:
            query = query.with_for_update()
        return query.first()
