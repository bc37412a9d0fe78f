from dataclasses import dataclass
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from storefront.models import db, Product, ProductReview


class PageRequestError(ValueError):
    """Raised when page / page_size are not positive integers."""


class CatalogError(Exception):
    """Raised when the product store cannot be queried."""


# OFFSET est un entier signé 64 bits côté base
MAX_OFFSET = 2 ** 63 - 1


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def parse_page_request(page: str, page_size: str, max_page_size: int = 100) -> PageRequest:
    try:
        page_num = int(str(page).strip())
        size = int(str(page_size).strip())
    except (TypeError, ValueError):
        raise PageRequestError(f"page and page_size must be integers, got {page!r} / {page_size!r}") from None
    if page_num < 1 or size < 1:
        raise PageRequestError(f"page and page_size must be positive, got {page_num} / {size}")
    req = PageRequest(page=page_num, page_size=min(size, max_page_size))
    if req.offset > MAX_OFFSET:
        raise PageRequestError(f"page {page_num} is out of range")
    return req


# Repositories
class ProductRepository:
    def _active(self):
        return Product.query.filter(Product.deleted_at.is_(None))

    def get(self, product_id: int) -> Optional[Product]:
        return self._active().filter(Product.id == product_id).first()

    def page(self, offset: int, limit: int) -> List[Product]:
        return self._active().order_by(Product.id).offset(offset).limit(limit).all()

    def count(self) -> int:
        return self._active().count()

    def reviews_for(self, product_id: int) -> List[ProductReview]:
        return ProductReview.query.filter_by(product_id=product_id).order_by(ProductReview.id).all()


# Services
class CatalogService:
    def __init__(self, products: ProductRepository, max_page_size: int = 100):
        self.products = products
        self.max_page_size = max_page_size

    def _run(self, query, *args):
        try:
            return query(*args)
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception("product query failed")
            raise CatalogError("Failed to fetch products.") from exc

    def page_request(self, page: str, page_size: str) -> PageRequest:
        return parse_page_request(page, page_size, self.max_page_size)

    def get_page(self, req: PageRequest) -> List[Product]:
        return self._run(self.products.page, req.offset, req.page_size)

    def get_products(self, page: str, page_size: str) -> List[Product]:
        """Return one page of products; `page` and `page_size` come straight from the query string."""
        return self.get_page(self.page_request(page, page_size))

    def count_products(self) -> int:
        return self._run(self.products.count)

    def get_product(self, product_id: int) -> Optional[Product]:
        return self._run(self.products.get, product_id)

    def get_reviews(self, product_id: int) -> List[ProductReview]:
        return self._run(self.products.reviews_for, product_id)


def create_services(config):
    prod_repo = ProductRepository()
    catalog_svc = CatalogService(prod_repo, max_page_size=config.get("PRODUCTS_MAX_PAGE_SIZE", 100))
    return {
        "prod_repo": prod_repo,
        "catalog": catalog_svc,
    }
