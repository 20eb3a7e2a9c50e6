import math
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.exceptions import ProductNotFound
from storefront.enums.catalog import ProductSort
from storefront.models.product import Product
from storefront.schemas.product import ProductCreate, ProductFilters, ProductUpdate

# brand/category "in" filters are capped like the hosted store's "in" queries
MAX_IN_FILTER_VALUES = 10


# --------------------------
# CREATE PRODUCT
# --------------------------
def create_product(db: Session, data: ProductCreate) -> Product:
    product = Product(**data.model_dump())
    product.current_bid = data.starting_bid
    product.bid_count = 0
    db.add(product)
    db.commit()
    db.refresh(product)
    return product

# --------------------------
# GET PRODUCT
# --------------------------
def get_product(db: Session, product_id: str) -> Optional[Product]:
    return db.query(Product).filter(Product.product_id == product_id).first()


def get_product_or_404(db: Session, product_id: str) -> Product:
    product = get_product(db, product_id)
    if not product:
        raise ProductNotFound(product_id)
    return product


def get_product_by_slug(db: Session, slug: str) -> Optional[Product]:
    return db.query(Product).filter(Product.slug == slug).first()

# --------------------------
# UPDATE PRODUCT
# --------------------------
def update_product(db: Session, product_id: str, data: ProductUpdate) -> Optional[Product]:
    product = get_product(db, product_id)
    if not product:
        return None

    for key, value in data.model_dump().items():
        if hasattr(product, key):
            setattr(product, key, value)

    # keep the standing bid in step with the opening price until someone bids
    if product.bid_count == 0:
        product.current_bid = product.starting_bid
    # incremented in SQL, not from the loaded value
    product.version = Product.version + 1

    db.commit()
    db.refresh(product)
    return product


# --------------------------
# DELETE PRODUCT
# --------------------------
def delete_product(db: Session, product_id: str) -> bool:
    product = get_product(db, product_id)
    if not product:
        return False

    db.delete(product)
    db.commit()
    return True

# --------------------------
# LIST / FILTER PRODUCTS
# --------------------------
def _clamp_page(page: int, limit: Optional[int]):
    if page < 1:
        page = 1
    if limit is None:
        limit = settings.DEFAULT_PAGE_SIZE
    if limit < 1:
        limit = 1
    if limit > settings.MAX_PAGE_SIZE:
        limit = settings.MAX_PAGE_SIZE
    return page, limit


def list_products(db: Session, filters: Optional[ProductFilters] = None):
    """
    Returns (items, total_count, total_pages, page).
    page is 1-based.
    """
    filters = filters or ProductFilters()
    page, limit = _clamp_page(filters.page, filters.limit)

    query = db.query(Product).filter(Product.is_active.is_(True))

    if filters.category_ids:
        query = query.filter(Product.category.in_(filters.category_ids[:MAX_IN_FILTER_VALUES]))
    if filters.brand_names:
        query = query.filter(Product.brand.in_(filters.brand_names[:MAX_IN_FILTER_VALUES]))
    if filters.price_min is not None:
        query = query.filter(Product.price >= filters.price_min)
    if filters.price_max is not None:
        query = query.filter(Product.price <= filters.price_max)
    if filters.in_stock:
        query = query.filter(Product.stock > 0)
    if filters.search_term:
        pattern = f"%{filters.search_term.strip()}%"
        query = query.filter(
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.brand.ilike(pattern),
            )
        )

    total = query.count()

    if filters.sort_by == ProductSort.price_asc:
        query = query.order_by(Product.price.asc())
    elif filters.sort_by == ProductSort.price_desc:
        query = query.order_by(Product.price.desc())
    elif filters.sort_by == ProductSort.newest:
        query = query.order_by(Product.created_at.desc())
    elif filters.sort_by == ProductSort.rating:
        query = query.order_by(Product.rating.desc())
    else:
        query = query.order_by(Product.is_featured.desc(), Product.created_at.desc())

    items = (
        query
        .order_by(Product.product_id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total_pages = math.ceil(total / limit) if total else 0

    return items, total, total_pages, page


def list_brands(db: Session) -> List[str]:
    rows = (
        db.query(Product.brand)
        .filter(Product.brand.isnot(None))
        .distinct()
        .order_by(Product.brand)
        .all()
    )
    return [row.brand for row in rows]


def list_categories(db: Session) -> List[str]:
    rows = (
        db.query(Product.category)
        .filter(Product.is_active.is_(True))
        .distinct()
        .order_by(Product.category)
        .all()
    )
    return [row.category for row in rows]
