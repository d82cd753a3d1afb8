from typing import Optional
from fastapi import APIRouter, Query, Request
from starlette import status
from core.exceptions import PersistenceFailure
from middleware.rate_limiter import limiter
from schemas.product_schemas import (ProductResponse, ProductCreateRequest, ProductUpdateRequest,
                                     StockResponse)
from services.product_service import ProductService, parse_product_id
from services.stock_service import StockService
from sqlalchemy.exc import SQLAlchemyError
from utils.deps import db_dependency
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/products",
    tags=["products"]
)


@router.get("", response_model=list[ProductResponse])
@limiter.limit("120/minute")
async def list_products(request: Request, db: db_dependency,
                        category: Optional[str] = None,
                        collaborateur: Optional[str] = None,
                        sort: Optional[str] = None,
                        product: Optional[str] = None):
    """
    Catalog listing. All filters are optional; `sort` is one of
    featured (default), newest, price-asc, price-desc.
    """
    try:
        return ProductService.list_products(db, category=category, collaborateur=collaborateur,
                                            sort=sort, product=product)
    except SQLAlchemyError as e:
        logger.error("Product listing failed", extra={"error": str(e)}, exc_info=True)
        raise PersistenceFailure("fetch products", e)


@router.get("/home", response_model=list[ProductResponse])
@limiter.limit("120/minute")
async def list_home_products(request: Request, db: db_dependency):
    try:
        return ProductService.list_home_products(db)
    except SQLAlchemyError as e:
        logger.error("Home product listing failed", extra={"error": str(e)}, exc_info=True)
        raise PersistenceFailure("fetch home products", e)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(body: ProductCreateRequest, db: db_dependency):
    return ProductService.create_product(db, body)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, db: db_dependency):
    return ProductService.get_product(db, parse_product_id(product_id))


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, body: ProductUpdateRequest, db: db_dependency):
    return ProductService.update_product(db, parse_product_id(product_id), body)


@router.delete("/{product_id}", status_code=status.HTTP_200_OK)
async def delete_product(product_id: str, db: db_dependency):
    ProductService.delete_product(db, parse_product_id(product_id))
    return {"message": "Product deleted successfully"}


@router.get("/{product_id}/stock", response_model=list[StockResponse])
async def get_product_stock(product_id: str, db: db_dependency,
                            size: Optional[str] = None,
                            color_id: Optional[int] = Query(default=None, alias="colorId")):
    try:
        return StockService.list_stock(db, parse_product_id(product_id), size=size, color_id=color_id)
    except SQLAlchemyError as e:
        logger.error("Stock lookup failed", extra={"product_id": product_id, "error": str(e)}, exc_info=True)
        raise PersistenceFailure("fetch stock information", e)
