"""Domain entity shapes read by the payload capturers.

The catalog, checkout and account layers own these records; Hookpost only
reads them. Capturers access attributes by name, so ORM objects exposing
the same attributes can be passed instead of these models.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class Address(BaseModel):
    """Billing or shipping address."""

    first_name: str = ""
    last_name: str = ""
    company: str = ""
    address_1: str = ""
    address_2: str = ""
    city: str = ""
    state: str = ""
    postcode: str = ""
    country: str | None = None
    email: str = ""
    phone: str = ""


class ProductPrice(BaseModel):
    """One purchasable price of a product."""

    name: str
    price: Decimal
    compare_price: Decimal | None = None
    menu_order: int = 0
    setup_fee: bool = False
    setup_fee_name: str = ""
    setup_fee_price: Decimal | None = None
    setup_fee_type: str = ""
    trial: bool = False
    trial_days: int = 0
    expire: bool = False
    expire_days: int = 0
    payment_duration: int = 0
    payment_duration_type: str = ""
    upgradeable: bool = False


class Product(BaseModel):
    """Catalog product."""

    id: int
    title: str
    slug: str = ""
    status: str = "publish"
    type: str = "simple"
    description: str = ""
    short_description: str = ""
    author_id: int | None = None
    date_created_gmt: datetime | None = None
    date_modified_gmt: datetime | None = None
    meta: dict[str, Any] = Field(default_factory=dict)
    prices: list[ProductPrice] = Field(default_factory=list)


class Coupon(BaseModel):
    """Discount coupon."""

    id: int
    code: str
    status: str = "publish"
    discount_type: str = "percentage"
    amount: Decimal = Decimal("0")
    description: str = ""
    usage_limit: int | None = None
    usage_count: int = 0
    minimum_amount: Decimal | None = None
    expires_at: datetime | None = None
    date_created_gmt: datetime | None = None
    date_modified_gmt: datetime | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class OrderLineItem(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity: int = 1
    price: Decimal = Decimal("0")
    meta_data: dict[str, Any] = Field(default_factory=dict)


class OrderFee(BaseModel):
    id: int
    name: str
    tax_class: str = ""
    tax_status: str = "taxable"
    amount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    total_tax: Decimal = Decimal("0")
    taxes: dict[str, Any] = Field(default_factory=dict)


class OrderTax(BaseModel):
    code: str
    label: str
    amount: Decimal = Decimal("0")


class OrderCoupon(BaseModel):
    code: str
    discount: Decimal = Decimal("0")


class RefundedBy(BaseModel):
    user_id: int
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""


class OrderRefund(BaseModel):
    id: int
    total: Decimal
    refunded_by: RefundedBy | None = None
    date_created_gmt: datetime | None = None


class Order(BaseModel):
    """Checkout order with its totals and sub-aggregates."""

    id: int
    status: str
    paid_status: str = "unpaid"
    currency: str = "USD"
    type: str = "order"
    is_editable: bool = False
    date_created_gmt: datetime | None = None
    date_paid_gmt: datetime | None = None
    order_placed_date_gmt: datetime | None = None
    subtotal: Decimal = Decimal("0")
    total_tax: Decimal = Decimal("0")
    shipping_total: Decimal = Decimal("0")
    total_refunded: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    customer_id: int | None = None
    order_email: str = ""
    billing: Address = Field(default_factory=Address)
    shipping: Address = Field(default_factory=Address)
    payment_method: str = ""
    payment_method_title: str = ""
    transaction_id: str = ""
    customer_note: str = ""
    auto_complete_digital_order: bool = False
    coupons: list[OrderCoupon] = Field(default_factory=list)
    fees: list[OrderFee] = Field(default_factory=list)
    tax_totals: list[OrderTax] = Field(default_factory=list)
    line_items: list[OrderLineItem] = Field(default_factory=list)
    refunds: list[OrderRefund] = Field(default_factory=list)
    meta_data: dict[str, Any] = Field(default_factory=dict)


class Customer(BaseModel):
    """Store customer account."""

    id: int
    email: str
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""
    username: str = ""
    date_created_gmt: datetime | None = None
    billing: Address | None = None
    shipping: Address | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


__all__ = [
    "Address",
    "Coupon",
    "Customer",
    "Order",
    "OrderCoupon",
    "OrderFee",
    "OrderLineItem",
    "OrderRefund",
    "OrderTax",
    "Product",
    "ProductPrice",
    "RefundedBy",
]
