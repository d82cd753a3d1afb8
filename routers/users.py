from fastapi import APIRouter, HTTPException, Request, status
from middleware.rate_limiter import limiter
from routers.orders import order_summary
from schemas.auth_schemas import UserResponse
from schemas.order_schemas import OrderResponse
from services.auth_service import AuthService
from services.order_service import OrderService
from utils.deps import user_dependency, db_dependency


router = APIRouter(
    prefix="/users",
    tags=["users"]
)


@router.get("/me", response_model=UserResponse)
@limiter.limit("30/minute")
async def get_user_info(request: Request, user: user_dependency, db: db_dependency):
    """
    Profile of the signed-in shopper; the cart page uses it to prefill
    the delivery details.
    """
    model = AuthService.get_active_user_by_id(db=db, user_id=user.get("user_id"))

    if not model:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return model


@router.get("/me/orders", response_model=list[OrderResponse])
@limiter.limit("30/minute")
async def get_user_orders(request: Request, user: user_dependency, db: db_dependency):
    """Order history, newest first."""
    orders = OrderService.list_user_orders(db, user.get("user_id"))
    return [order_summary(order) for order in orders]
