from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    what_event: Optional[str] = None
    image_url: Optional[str] = None
    price: float
    discount_rate: float
    final_price: float
    stock: int
    created_at: Optional[datetime] = None


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    what_event: Optional[str] = None
    image_url: Optional[str] = None
    price: float = Field(ge=0)
    discount_rate: float = Field(default=0, ge=0, le=100)
    stock: int = Field(default=0, ge=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    what_event: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    discount_rate: Optional[float] = Field(default=None, ge=0, le=100)
    stock: Optional[int] = Field(default=None, ge=0)


class ProductFilters(BaseModel):
    name: Optional[str] = None
    price_from: Optional[float] = Field(default=None, alias="priceFrom")
    price_to: Optional[float] = Field(default=None, alias="priceTo")
    category: Optional[str] = None
    tag: Optional[str] = None
    event: Optional[str] = None
    # "<column>_asc" or "<column>_desc"
    sort: Optional[str] = None
    limit: int = Field(default=10, ge=1, le=100)
    page: int = Field(default=1, ge=1)


class ProductPage(BaseModel):
    totalProducts: int
    products: list[ProductOut]
    page: int
    totalPages: int


class SearchSuggestions(BaseModel):
    name: list[str]
    categories: list[str]
    tags: list[str]
    events: list[str]
