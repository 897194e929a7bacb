from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class OrderItem(BaseModel):
    product_id: int
    product_name: str
    quantity: int = Field(gt=0)
    price: float = Field(ge=0)


class CreateOrderRequest(BaseModel):
    items: list[OrderItem] = Field(min_length=1)
    total_price: float = Field(ge=0)
    discount_amount: float = Field(default=0, ge=0)
    delivery_address: str = Field(min_length=1)


class PaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: int = Field(alias="orderId")
    amount: float = Field(gt=0)
    payment_method: str = Field(alias="paymentMethod", min_length=1)


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: int
    total_price: float
    discount_amount: float
    delivery_address: str
    order_items: list[dict]
    status: str
    created_at: Optional[datetime] = None
