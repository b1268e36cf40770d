# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal
from decimal import Decimal
from datetime import datetime


Brand = Literal["Ferrari", "Opel", "Lenovo", "Fossil"]
Finish = Literal["Black", "White", "Navy Blue", "Red", "Clear", "Satin", "Yellow", "Seafoam"]
Condition = Literal["New", "Excellent", "Mint", "Used", "Fair", "Poor"]


class ItemIn(BaseModel):
    """Adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product ID (must be > 0)")
    quantity: int = Field(1, gt=0, description="How many to add (must be > 0)")


class QuantityIn(BaseModel):
    """Setting an item quantity; zero removes the item."""

    quantity: int = Field(..., ge=0, description="New quantity (0 removes the item)")


class DecrementIn(BaseModel):
    quantity: int = Field(1, gt=0, description="How many to take away (must be > 0)")


class CartItemOut(BaseModel):
    product_id: int
    title: str
    quantity: int
    price: Decimal
    line_total: Decimal


class CartOut(BaseModel):
    """Current cart (response)."""

    cart_id: str
    user_id: int | None = None
    items: List[CartItemOut]
    total_items: int
    total_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartActionOut(BaseModel):
    """Reply for AJAX cart mutations."""

    status: Literal["success", "error"]
    cart_count: int
    cart_total: Decimal | None = None
    message: str


class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=140)
    brand: Brand
    model: str = Field(..., min_length=1)
    description: str | None = Field(None, max_length=1000)
    condition: Condition | None = None
    finish: Finish | None = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class ProductUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=140)
    brand: Brand | None = None
    model: str | None = Field(None, min_length=1)
    description: str | None = Field(None, max_length=1000)
    condition: Condition | None = None
    finish: Finish | None = None
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)


class ProductRead(BaseModel):
    id: int
    user_id: int | None = None
    title: str
    brand: str
    model: str
    description: str | None = None
    condition: str | None = None
    finish: str | None = None
    price: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """Registering a user."""

    id: int = Field(..., gt=0, description="User ID (must be > 0)")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")


class UserRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class LoginIn(BaseModel):
    user_id: int = Field(..., gt=0)


class MergeOut(BaseModel):
    status: Literal["merged", "skipped", "failed"]
    merged_items: int = 0


class LoginOut(BaseModel):
    user: UserRead
    cart_count: int
    merge: MergeOut
