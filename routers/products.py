from typing import Annotated
from fastapi import APIRouter, Depends, Query
from schemas.product_schemas import ProductFilters, ProductOut, ProductPage, SearchSuggestions
from services.product_service import ProductService
from utils.deps import db_dependency


router = APIRouter(
    prefix="/product",
    tags=["product"]
)


@router.get("", response_model=ProductPage)
async def list_products(filters: Annotated[ProductFilters, Query()], db: db_dependency):
    """
    Filtered, sorted and paged product listing.
    """
    return ProductService.list_products(db, filters)


@router.get("/suggestions", response_model=SearchSuggestions)
async def search_suggestions(db: db_dependency, keyword: str = Query(min_length=1)):
    return ProductService.get_search_suggestions(db, keyword)


@router.get("/top-selling", response_model=list[ProductOut])
async def top_selling(db: db_dependency):
    return ProductService.get_top_selling_by_category(db)


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: int, db: db_dependency):
    return ProductService.get_product_by_id(db, product_id)
