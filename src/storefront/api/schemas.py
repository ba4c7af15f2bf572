"""Pydantic request/response schemas for the storefront API.

These are external contracts, kept separate from the internal Protean
commands and aggregates.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, model_validator

PaymentMethodName = Literal["card", "paypal", "cash_on_delivery"]
OrderStatusName = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
PaymentStatusName = Literal["pending", "paid", "failed"]


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class PaginationSchema(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_page(cls, page):
        return cls(**page.to_dict())


class CategorySummary(BaseModel):
    id: str
    name: str
    slug: str

    @classmethod
    def from_category(cls, category):
        if category is None:
            return None
        return cls(id=str(category.id), name=category.name, slug=category.slug)


class ImageSchema(BaseModel):
    url: str
    alt_text: str | None = None
    display_order: int = 0


class VariantSchema(BaseModel):
    id: str
    name: str
    value: str
    price: float | None = None
    stock: int = 0
    sku: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class SignInRequest(BaseModel):
    external_id: str | None = None
    email: str | None = None

    @model_validator(mode="after")
    def one_identifier_required(self):
        if not self.external_id and not self.email:
            raise ValueError("Either external_id or email is required")
        return self

    model_config = {"json_schema_extra": {"examples": [{"email": "customer@example.com"}]}}


class UserResponse(BaseModel):
    id: str
    email: str
    name: str | None = None
    role: str

    @classmethod
    def from_user(cls, user):
        return cls(id=str(user.id), email=user.email, name=user.name, role=user.role)


class LoginInfoResponse(BaseModel):
    message: str
    next: str | None = None
    sign_in: str = "/auth/session"


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class ProductCard(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    price: float
    compare_price: float | None = None
    discount_percent: int = 0
    stock: int
    in_stock: bool
    is_low_stock: bool
    is_featured: bool
    primary_image: ImageSchema | None = None
    category: CategorySummary | None = None
    average_rating: float = 0.0
    review_count: int = 0

    @classmethod
    def card_fields(cls, listing):
        product = listing.product
        image = product.primary_image
        return {
            "id": str(product.id),
            "name": product.name,
            "slug": product.slug,
            "description": product.description,
            "price": product.price,
            "compare_price": product.compare_price,
            "discount_percent": product.discount_percent,
            "stock": product.stock,
            "in_stock": product.in_stock,
            "is_low_stock": product.is_low_stock,
            "is_featured": product.is_featured,
            "primary_image": (
                ImageSchema(url=image.url, alt_text=image.alt_text, display_order=image.display_order or 0)
                if image
                else None
            ),
            "category": CategorySummary.from_category(listing.category),
            "average_rating": listing.average_rating,
            "review_count": listing.review_count,
        }

    @classmethod
    def from_listing(cls, listing):
        return cls(**cls.card_fields(listing))


class ProductListResponse(BaseModel):
    products: list[ProductCard]
    pagination: PaginationSchema


class ReviewResponse(BaseModel):
    id: str
    user_id: str
    rating: int
    title: str | None = None
    comment: str | None = None
    is_verified: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_review(cls, review):
        return cls(
            id=str(review.id),
            user_id=str(review.user_id),
            rating=review.rating,
            title=review.title,
            comment=review.comment,
            is_verified=bool(review.is_verified),
            created_at=review.created_at,
        )


class ProductDetailResponse(ProductCard):
    images: list[ImageSchema] = []
    variants: list[VariantSchema] = []
    reviews: list[ReviewResponse] = []

    @classmethod
    def from_listing(cls, listing, reviews=()):
        product = listing.product
        return cls(
            **cls.card_fields(listing),
            images=[
                ImageSchema(url=i.url, alt_text=i.alt_text, display_order=i.display_order or 0)
                for i in sorted(product.images, key=lambda i: i.display_order or 0)
            ],
            variants=[
                VariantSchema(id=str(v.id), name=v.name, value=v.value, price=v.price, stock=v.stock or 0, sku=v.sku)
                for v in product.variants
            ],
            reviews=[ReviewResponse.from_review(r) for r in reviews],
        )


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    image: str | None = None
    parent_id: str | None = None
    product_count: int = 0


class CreateCategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=120)
    description: str | None = None
    image: str | None = None
    parent_id: str | None = None


class ImageRequest(BaseModel):
    url: str = Field(min_length=1, max_length=500)
    alt_text: str | None = None


class VariantRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    value: str = Field(min_length=1, max_length=100)
    price: float | None = Field(default=None, ge=0)
    stock: int = Field(default=0, ge=0)
    sku: str | None = None


class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=200)
    description: str | None = None
    price: float = Field(gt=0)
    compare_price: float | None = Field(default=None, ge=0)
    sku: str | None = None
    stock: int = Field(default=0, ge=0)
    low_stock: int | None = Field(default=None, ge=0)
    is_active: bool = True
    is_featured: bool = False
    category_id: str | None = None
    images: list[ImageRequest] = []
    variants: list[VariantRequest] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Wireless Mouse",
                    "slug": "wireless-mouse",
                    "price": 29.99,
                    "stock": 120,
                    "images": [{"url": "https://cdn.example.com/mouse.jpg"}],
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    compare_price: float | None = Field(default=None, ge=0)
    sku: str | None = None
    stock: int | None = Field(default=None, ge=0)
    low_stock: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
    is_featured: bool | None = None
    category_id: str | None = None


class AdminProductResponse(ProductDetailResponse):
    sku: str | None = None
    low_stock: int
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_listing(cls, listing, reviews=()):
        product = listing.product
        base = ProductDetailResponse.from_listing(listing, reviews).model_dump()
        return cls(
            **base,
            sku=product.sku,
            low_stock=product.low_stock,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class AdminProductListResponse(BaseModel):
    products: list[AdminProductResponse]
    pagination: PaginationSchema


class ProductIdResponse(BaseModel):
    product_id: str


class CategoryIdResponse(BaseModel):
    category_id: str


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1, le=99)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=0, le=99)


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    name: str
    slug: str
    price: float
    stock: int
    quantity: int
    line_total: float
    image_url: str | None = None
    category_name: str | None = None
    category_slug: str | None = None
    added_at: datetime | None = None


class CartTotals(BaseModel):
    subtotal: float
    total_items: int
    item_count: int


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    summary: CartTotals

    @classmethod
    def from_summary(cls, summary):
        return cls(
            items=[
                CartLineResponse(
                    id=line.item_id,
                    product_id=line.product_id,
                    name=line.name,
                    slug=line.slug,
                    price=line.price,
                    stock=line.stock,
                    quantity=line.quantity,
                    line_total=line.line_total,
                    image_url=line.image_url,
                    category_name=line.category_name,
                    category_slug=line.category_slug,
                    added_at=line.added_at,
                )
                for line in summary.lines
            ],
            summary=CartTotals(
                subtotal=summary.subtotal,
                total_items=summary.total_items,
                item_count=summary.item_count,
            ),
        )


class QuoteResponse(BaseModel):
    subtotal: float
    tax_amount: float
    shipping_amount: float
    total: float


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=10, max_length=30)
    address: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    zip_code: str = Field(min_length=5, max_length=20)
    country: str = Field(min_length=1, max_length=100)

    @classmethod
    def from_snapshot(cls, snapshot):
        return cls(
            first_name=snapshot.first_name,
            last_name=snapshot.last_name,
            email=snapshot.email,
            phone=snapshot.phone,
            address=snapshot.address,
            city=snapshot.city,
            state=snapshot.state,
            zip_code=snapshot.zip_code,
            country=snapshot.country,
        )


class OrderLineRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    price: float = Field(gt=0)


class PlaceOrderRequest(BaseModel):
    items: list[OrderLineRequest] = Field(min_length=1)
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: PaymentMethodName
    subtotal: float = Field(gt=0)
    tax_amount: float = Field(default=0.0, ge=0)
    shipping_amount: float = Field(default=0.0, ge=0)
    total: float = Field(gt=0)
    notes: str | None = Field(default=None, max_length=1000)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2, "price": 29.99}],
                    "shipping_address": {
                        "first_name": "Ada",
                        "last_name": "Lovelace",
                        "email": "ada@example.com",
                        "phone": "5550100100",
                        "address": "12 Analytical Way",
                        "city": "London",
                        "state": "LDN",
                        "zip_code": "10001",
                        "country": "UK",
                    },
                    "payment_method": "card",
                    "subtotal": 59.98,
                    "tax_amount": 4.8,
                    "shipping_amount": 0.0,
                    "total": 64.78,
                }
            ]
        }
    }


class UpdateOrderRequest(BaseModel):
    status: OrderStatusName | None = None
    payment_status: PaymentStatusName | None = None
    tracking_number: str | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def one_field_required(self):
        if self.status is None and self.payment_status is None and self.tracking_number is None:
            raise ValueError("At least one of status, payment_status or tracking_number is required")
        return self


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    line_total: float


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    customer_name: str | None = None
    customer_email: str | None = None
    status: str
    payment_status: str
    payment_method: str
    subtotal: float
    tax_amount: float
    shipping_amount: float
    total: float
    notes: str | None = None
    tracking_number: str | None = None
    shipping_address: AddressSchema
    billing_address: AddressSchema
    items: list[OrderItemResponse]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order):
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id),
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            subtotal=order.subtotal,
            tax_amount=order.tax_amount or 0.0,
            shipping_amount=order.shipping_amount or 0.0,
            total=order.total,
            notes=order.notes,
            tracking_number=order.tracking_number,
            shipping_address=AddressSchema.from_snapshot(order.shipping_address),
            billing_address=AddressSchema.from_snapshot(order.billing_address),
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: PaginationSchema

    @classmethod
    def from_page(cls, page):
        return cls(
            orders=[OrderResponse.from_order(order) for order in page.items],
            pagination=PaginationSchema.from_page(page),
        )


# ---------------------------------------------------------------------------
# Reviews & wishlist
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    rating: int = Field(ge=1, le=5)
    title: str | None = Field(default=None, max_length=200)
    comment: str | None = Field(default=None, max_length=2000)


class ReviewIdResponse(BaseModel):
    review_id: str


class AddToWishlistRequest(BaseModel):
    product_id: str


class WishlistEntryResponse(BaseModel):
    product_id: str
    name: str
    slug: str
    price: float
    in_stock: bool
    added_at: datetime | None = None


# ---------------------------------------------------------------------------
# Dashboards & reports
# ---------------------------------------------------------------------------
class DashboardResponse(BaseModel):
    user: UserResponse
    cart: CartTotals
    recent_orders: list[OrderResponse]


class LowStockEntry(BaseModel):
    product_id: str
    name: str
    sku: str | None = None
    stock: int
    low_stock: int
    is_out_of_stock: bool
    detected_at: datetime | None = None


class AdminOverviewResponse(BaseModel):
    product_count: int
    active_product_count: int
    low_stock_count: int
    total_orders: int
    orders_by_status: dict[str, int]
    paid_revenue: float
