"""Administration endpoints. Every route requires an ADMIN or SUPER_ADMIN session."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.deps import require_admin
from storefront.api.schemas import (
    AdminOverviewResponse,
    AdminProductListResponse,
    AdminProductResponse,
    CategoryIdResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    LowStockEntry,
    OrderListResponse,
    OrderResponse,
    OrderStatusName,
    PaginationSchema,
    PaymentStatusName,
    StatusResponse,
    UpdateProductRequest,
)
from storefront.catalogue.browsing import ProductListing, list_products
from storefront.catalogue.management import CreateCategory, CreateProduct, DeleteProduct, UpdateProduct
from storefront.catalogue.product import Product
from storefront.order.queries import ADMIN_PAGE_SIZE, get_order, list_all_orders, order_statistics
from storefront.projections.low_stock import low_stock_count, low_stock_report
from storefront.utils.pagination import MAX_LIMIT

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _admin_product(product_id) -> AdminProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return AdminProductResponse.from_listing(
        ProductListing(product=product, category=None, average_rating=0.0, review_count=0)
    )


@router.get("", response_model=AdminOverviewResponse)
async def overview() -> AdminOverviewResponse:
    products = current_domain.repository_for(Product)._dao.query.all()
    active = current_domain.repository_for(Product)._dao.query.filter(is_active=True).all()
    return AdminOverviewResponse(
        product_count=products.total,
        active_product_count=active.total,
        low_stock_count=low_stock_count(),
        **order_statistics(),
    )


# --- Orders ---


@router.get("/orders", response_model=OrderListResponse)
async def all_orders(
    status: OrderStatusName | None = None,
    payment_status: PaymentStatusName | None = None,
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=ADMIN_PAGE_SIZE, ge=1, le=MAX_LIMIT),
) -> OrderListResponse:
    return OrderListResponse.from_page(
        list_all_orders(status=status, payment_status=payment_status, search=search, page=page, limit=limit)
    )


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def admin_order_detail(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(get_order(order_id))


# --- Products ---


@router.get("/products", response_model=AdminProductListResponse)
async def admin_products(
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=ADMIN_PAGE_SIZE, ge=1, le=MAX_LIMIT),
) -> AdminProductListResponse:
    result = list_products(search=search, page=page, limit=limit, include_inactive=True)
    return AdminProductListResponse(
        products=[AdminProductResponse.from_listing(listing) for listing in result.items],
        pagination=PaginationSchema.from_page(result),
    )


@router.post("/products", status_code=201, response_model=AdminProductResponse)
async def create_product(body: CreateProductRequest) -> AdminProductResponse:
    command = CreateProduct(
        name=body.name,
        slug=body.slug,
        description=body.description,
        price=body.price,
        compare_price=body.compare_price,
        sku=body.sku,
        stock=body.stock,
        low_stock=body.low_stock,
        is_active=body.is_active,
        is_featured=body.is_featured,
        category_id=body.category_id,
        images=json.dumps([image.model_dump() for image in body.images]),
        variants=json.dumps([variant.model_dump() for variant in body.variants]),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return _admin_product(product_id)


@router.patch("/products/{product_id}", response_model=AdminProductResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> AdminProductResponse:
    command = UpdateProduct(product_id=product_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return _admin_product(product_id)


@router.delete("/products/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@router.post("/categories", status_code=201, response_model=CategoryIdResponse)
async def create_category(body: CreateCategoryRequest) -> CategoryIdResponse:
    category_id = current_domain.process(CreateCategory(**body.model_dump()), asynchronous=False)
    return CategoryIdResponse(category_id=category_id)


# --- Reports ---


@router.get("/reports/low-stock", response_model=list[LowStockEntry])
async def low_stock() -> list[LowStockEntry]:
    return [
        LowStockEntry(
            product_id=str(entry.product_id),
            name=entry.name,
            sku=entry.sku,
            stock=entry.stock,
            low_stock=entry.low_stock,
            is_out_of_stock=bool(entry.is_out_of_stock),
            detected_at=entry.detected_at,
        )
        for entry in low_stock_report()
    ]
