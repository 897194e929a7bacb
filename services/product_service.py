import math
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased
from core.exceptions import DatabaseError, NotFoundError, ValidationError
from models.products import Product
from schemas.product_schemas import ProductFilters
from utils.logger import get_logger

logger = get_logger(__name__)

SORTABLE_COLUMNS = {
    "name": Product.name,
    "price": Product.price,
    "final_price": Product.final_price,
    "discount_rate": Product.discount_rate,
    "stock": Product.stock,
    "created_at": Product.created_at,
    "product_id": Product.product_id,
}

TOP_PER_CATEGORY = 8


def parse_sort(sort: str | None):
    """'final_price_asc' -> Product.final_price.asc(); None -> None."""
    if not sort:
        return None

    if sort.endswith("_asc"):
        column_name, descending = sort[:-4], False
    elif sort.endswith("_desc"):
        column_name, descending = sort[:-5], True
    else:
        raise ValidationError("sort must end with '_asc' or '_desc'.")

    column = SORTABLE_COLUMNS.get(column_name)
    if column is None:
        raise ValidationError(f"Cannot sort by '{column_name}'.")
    return column.desc() if descending else column.asc()


class ProductService:

    @staticmethod
    def get_product_by_id(db: Session, product_id: int) -> Product:
        try:
            product = db.query(Product).filter(Product.product_id == product_id).one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to load product", extra={"product_id": product_id}, exc_info=True)
            raise DatabaseError("Failed to load product.") from e

        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _apply_filters(query, filters: ProductFilters):
        if filters.name:
            query = query.filter(Product.name.contains(filters.name, autoescape=True))
        if filters.price_from is not None:
            query = query.filter(Product.final_price >= filters.price_from)
        if filters.price_to is not None:
            query = query.filter(Product.final_price <= filters.price_to)
        if filters.category:
            query = query.filter(Product.category == filters.category)
        if filters.tag:
            query = query.filter(Product.tags.contains(filters.tag, autoescape=True))
        if filters.event:
            query = query.filter(Product.what_event == filters.event)
        return query

    @staticmethod
    def list_products(db: Session, filters: ProductFilters) -> dict:
        """
        One page of products matching the filters, plus paging totals.
        """
        order_by = parse_sort(filters.sort)

        try:
            total = ProductService._apply_filters(db.query(func.count(Product.product_id)), filters).scalar()

            query = ProductService._apply_filters(db.query(Product), filters)
            if order_by is not None:
                query = query.order_by(order_by)
            products = query.limit(filters.limit).offset((filters.page - 1) * filters.limit).all()
        except SQLAlchemyError as e:
            logger.error("Failed to list products", exc_info=True)
            raise DatabaseError("Failed to load products.") from e

        return {
            "totalProducts": total,
            "products": products,
            "page": filters.page,
            "totalPages": math.ceil(total / filters.limit),
        }

    @staticmethod
    def get_search_suggestions(db: Session, keyword: str) -> dict:
        def distinct_matches(column) -> list[str]:
            rows = db.query(column).filter(column.contains(keyword, autoescape=True)).distinct().all()
            return [value for (value,) in rows if value is not None]

        try:
            return {
                "name": distinct_matches(Product.name),
                "categories": distinct_matches(Product.category),
                "tags": distinct_matches(Product.tags),
                "events": distinct_matches(Product.what_event),
            }
        except SQLAlchemyError as e:
            logger.error("Failed to build search suggestions", extra={"keyword": keyword}, exc_info=True)
            raise DatabaseError("Failed to load search suggestions.") from e

    @staticmethod
    def get_top_selling_by_category(db: Session) -> list[Product]:
        """
        Up to eight products per category, lowest stock first (stock is the
        sales proxy: what sold most has least left).
        """
        rank = func.row_number().over(
            partition_by=Product.category,
            order_by=(Product.stock.asc(), Product.product_id.asc())
        ).label("rn")
        ranked = select(Product, rank).subquery()
        ranked_product = aliased(Product, ranked)

        try:
            return db.query(ranked_product).filter(
                ranked.c.rn <= TOP_PER_CATEGORY
            ).order_by(ranked.c.category, ranked.c.rn).all()
        except SQLAlchemyError as e:
            logger.error("Failed to load top sellers", exc_info=True)
            raise DatabaseError("Failed to load top selling products.") from e
