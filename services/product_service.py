from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from core.exceptions import InvalidInput, NotFound, PersistenceFailure
from models.products import Product
from models.product_images import ProductImage, IMAGE_POSITIONS
from schemas.product_schemas import ProductCreateRequest, ProductUpdateRequest, ProductImageInput
from utils.logger import get_logger

logger = get_logger(__name__)


# Fields an admin edit may explicitly clear
NULLABLE_FIELDS = {"sale_price", "collaborateur"}


def parse_product_id(raw: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid product ID")


def main_image(images: list) -> Optional[object]:
    """
    The image flagged as main, else the first one. Rows written before
    the single-main rule was enforced may have none or several flagged.
    """
    if not images:
        return None
    return next((image for image in images if image.is_main), images[0])


def _order_by(sort: Optional[str]):
    if sort == "newest":
        return [Product.created_at.desc()]
    if sort == "price-asc":
        return [Product.price.asc(), Product.id.asc()]
    if sort == "price-desc":
        return [Product.price.desc(), Product.id.asc()]
    return [Product.priority.desc(), Product.created_at.desc()]


def _build_images(images: list[ProductImageInput]) -> list[ProductImage]:
    """
    Turn the submitted image list into rows. Positions default to
    front/back/side by index and exactly one image ends up main: the
    first one flagged, otherwise the first in the list.
    """
    main_index = next((i for i, image in enumerate(images) if image.is_main), 0)

    rows = []
    for index, image in enumerate(images):
        position = image.position or IMAGE_POSITIONS[min(index, len(IMAGE_POSITIONS) - 1)]
        rows.append(ProductImage(url=image.url, position=position, is_main=index == main_index))
    return rows


class ProductService:

    @staticmethod
    def list_products(db: Session, category: Optional[str] = None, collaborateur: Optional[str] = None,
                      sort: Optional[str] = None, product: Optional[str] = None) -> list[Product]:
        query = db.query(Product).options(selectinload(Product.images))

        if category:
            query = query.filter(Product.category == category.lower())

        if collaborateur:
            query = query.filter(func.lower(Product.collaborateur) == collaborateur.lower())

        if product:
            # "robot-cuiseur-xl" matches "Robot Cuiseur XL"
            words = product.replace("-", " ").strip().lower()
            query = query.filter(func.lower(Product.name).contains(words))

        return query.order_by(*_order_by(sort)).all()

    @staticmethod
    def list_home_products(db: Session) -> list[Product]:
        products = (
            db.query(Product)
            .options(selectinload(Product.images))
            .filter(Product.show_in_home == True)
            .order_by(*_order_by("featured"))
            .all()
        )

        # Only products that can actually show a picture
        return [p for p in products if any(image.url for image in p.images)]

    @staticmethod
    def get_product(db: Session, product_id: int) -> Product:
        try:
            product = (
                db.query(Product)
                .options(selectinload(Product.images))
                .filter(Product.id == product_id)
                .one_or_none()
            )
        except SQLAlchemyError as e:
            logger.error("Product lookup failed", extra={"product_id": product_id, "error": str(e)}, exc_info=True)
            raise PersistenceFailure("fetch product", e)

        if not product:
            raise NotFound("Product not found")
        return product

    @staticmethod
    def create_product(db: Session, body: ProductCreateRequest) -> Product:
        fields = body.model_dump(exclude={"images"}, exclude_none=True)
        fields["category"] = fields["category"].lower()

        product = Product(**fields)
        product.images = _build_images(body.images)

        try:
            db.add(product)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Product creation failed", extra={"error": str(e)}, exc_info=True)
            raise PersistenceFailure("create product", e)

        db.refresh(product)
        logger.info("Product created", extra={"product_id": product.id, "image_count": len(product.images)})
        return product

    @staticmethod
    def update_product(db: Session, product_id: int, body: ProductUpdateRequest) -> Product:
        """
        Apply an admin edit. Fields absent from the body are left alone;
        the images are always replaced by the submitted list, in the same
        transaction as the field update.
        """
        product = ProductService.get_product(db, product_id)

        fields = {
            name: value
            for name, value in body.model_dump(exclude={"images"}, exclude_unset=True).items()
            if value is not None or name in NULLABLE_FIELDS
        }
        if fields.get("category"):
            fields["category"] = fields["category"].lower()

        for name, value in fields.items():
            setattr(product, name, value)

        # delete-orphan removes the old rows on flush
        product.images = _build_images(body.images)

        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Product update failed", extra={"product_id": product_id, "error": str(e)}, exc_info=True)
            raise PersistenceFailure("update product", e)

        db.refresh(product)
        logger.info(
            "Product updated",
            extra={"product_id": product_id, "fields": sorted(fields), "image_count": len(product.images)}
        )
        return product

    @staticmethod
    def delete_product(db: Session, product_id: int) -> None:
        """
        Delete a product with its images and stock rows. Order items that
        reference it are kept and simply stop resolving to a product.
        """
        product = ProductService.get_product(db, product_id)

        try:
            db.delete(product)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Product deletion failed", extra={"product_id": product_id, "error": str(e)}, exc_info=True)
            raise PersistenceFailure("delete product", e)

        logger.info("Product deleted", extra={"product_id": product_id})
