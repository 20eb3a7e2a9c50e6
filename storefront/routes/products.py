from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from storefront.database.connection import get_db
from storefront.enums.catalog import ProductSort
from storefront.schemas.product import (
    ProductCreate,
    ProductFilters,
    ProductPage,
    ProductResponse,
    ProductUpdate,
)
from storefront.services.product_service import (
    create_product, get_product, get_product_by_slug, list_products,
    list_brands, list_categories, update_product, delete_product,
)
from storefront.dependencies.auth import require_admin


router = APIRouter(prefix="/products", tags=["Product Catalog"])

# CREATE
@router.post("/", response_model=ProductResponse, dependencies=[Depends(require_admin)])
def create(data: ProductCreate, db: Session = Depends(get_db)):
    if get_product(db, data.product_id):
        raise HTTPException(400, "Product id already exists")
    return create_product(db, data)

# LIST
@router.get("/", response_model=ProductPage)
def list_all(
    category: List[str] = Query(default=[]),
    brand: List[str] = Query(default=[]),
    price_min: Optional[float] = None,
    price_max: Optional[float] = None,
    in_stock: bool = False,
    q: Optional[str] = None,
    sort_by: ProductSort = ProductSort.featured,
    page: int = 1,
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
):
    filters = ProductFilters(
        category_ids=category,
        brand_names=brand,
        price_min=price_min,
        price_max=price_max,
        in_stock=in_stock,
        search_term=q,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    items, total, total_pages, current_page = list_products(db, filters)
    return ProductPage(
        items=[ProductResponse.model_validate(p) for p in items],
        total_products=total,
        total_pages=total_pages,
        current_page=current_page,
    )

# BRANDS
@router.get("/brands", response_model=list[str])
def brands(db: Session = Depends(get_db)):
    return list_brands(db)

# CATEGORIES
@router.get("/categories", response_model=list[str])
def categories(db: Session = Depends(get_db)):
    return list_categories(db)

# GET BY SLUG
@router.get("/slug/{slug}", response_model=ProductResponse)
def get_by_slug(slug: str, db: Session = Depends(get_db)):
    product = get_product_by_slug(db, slug)
    if not product:
        raise HTTPException(404, "Product not found")
    return product

# GET BY ID
@router.get("/{product_id}", response_model=ProductResponse)
def get(product_id: str, db: Session = Depends(get_db)):
    product = get_product(db, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    return product

# UPDATE
@router.put("/{product_id}", response_model=ProductResponse, dependencies=[Depends(require_admin)])
def update(product_id: str, data: ProductUpdate, db: Session = Depends(get_db)):
    product = update_product(db, product_id, data)
    if not product:
        raise HTTPException(404, "Product not found")
    return product

# DELETE
@router.delete("/{product_id}", dependencies=[Depends(require_admin)])
def delete(product_id: str, db: Session = Depends(get_db)):
    success = delete_product(db, product_id)
    if not success:
        raise HTTPException(404, "Product not found")
    return {"message": "Product deleted"}
