from fastapi import APIRouter, Request
from starlette import status
from middleware.rate_limiter import limiter
from models.orders import Order
from schemas.order_schemas import (CreateOrderRequest, DirectOrderRequest, OrderResponse,
                                   DirectOrderResponse)
from services.order_service import OrderService
from services.product_service import main_image
from utils.deps import db_dependency, optional_user_id_dependency
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/orders",
    tags=["orders"]
)


def order_summary(order: Order) -> OrderResponse:
    """
    Order as returned after checkout: each product shows only its main
    image (or a single fallback image).
    """
    response = OrderResponse.model_validate(order)
    for item in response.items:
        if item.product is not None:
            image = main_image(item.product.images)
            item.product.images = [image] if image else []
    return response


@router.post("", response_model=OrderResponse, status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def create_order(request: Request, body: CreateOrderRequest, db: db_dependency,
                       user_id: optional_user_id_dependency):
    order = OrderService.create_order(body, db, user_id)
    return order_summary(order)


@router.post("/direct", response_model=DirectOrderResponse, status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def create_direct_order(request: Request, body: DirectOrderRequest, db: db_dependency,
                              user_id: optional_user_id_dependency):
    order = OrderService.create_direct_order(body, db, user_id)
    return {"success": True, "order": OrderResponse.model_validate(order)}
