"""Shop routes: products, single-product orders and cart orders."""
from typing import Optional

from fastapi import APIRouter, Depends

from campus_suite.api.deps import ensure_owner_or_admin, get_email_sender, get_store, ok, transition_response
from campus_suite.core.auth import get_current_user, require_admin
from campus_suite.domain.content import StatusUpdate
from campus_suite.domain.shop import OrderCreate, ProductCreate, ProductUpdate, UserOrderCreate
from campus_suite.domain.user import User
from campus_suite.services.shop import OrderService, ProductService, UserOrderService
from campus_suite.services.workflow import UserOrderWorkflow

router = APIRouter(tags=["shop"])


# -----------------
# PRODUCTS
# -----------------

@router.post("/products", status_code=201)
def add_product(req: ProductCreate, store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(ProductService(store).create(req), message="Product added successfully")


@router.get("/products")
def list_products(store=Depends(get_store)):
    return ok(ProductService(store).list())


@router.get("/products/filters/types")
def product_types(store=Depends(get_store)):
    return ok(ProductService(store).types())


@router.get("/products/filters/brands")
def product_brands(store=Depends(get_store)):
    return ok(ProductService(store).brands())


@router.get("/products/filter")
def filter_products(
    type: Optional[str] = None,
    brand: Optional[str] = None,
    search: Optional[str] = None,
    store=Depends(get_store),
):
    """Filter by exact type and brand, and case-insensitive name search.

    Example:
        GET /api/products/filter?type=Apparel&search=hood
    """
    return ok(ProductService(store).filter(product_type=type, brand=brand, search=search))


@router.get("/products/{product_id}")
def get_product(product_id: int, store=Depends(get_store)):
    return ok(ProductService(store).get(product_id))


@router.put("/products/{product_id}")
def update_product(product_id: int, req: ProductUpdate, store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(ProductService(store).update(product_id, req), message="Product updated successfully")


@router.delete("/products/{product_id}")
def delete_product(product_id: int, store=Depends(get_store), admin: User = Depends(require_admin)):
    ProductService(store).delete(product_id)
    return ok(message="Product deleted successfully")


# -----------------
# ORDERS
# -----------------

@router.post("/orders", status_code=201)
def create_order(req: OrderCreate, store=Depends(get_store), current_user: User = Depends(get_current_user)):
    return ok(OrderService(store).create(req), message="Order created successfully")


@router.get("/orders")
def list_orders(store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(OrderService(store).list())


# -----------------
# USER ORDERS
# -----------------

@router.post("/user-orders", status_code=201)
def place_user_order(req: UserOrderCreate, store=Depends(get_store), current_user: User = Depends(get_current_user)):
    return ok(UserOrderService(store).place(req), message="Order placed successfully")


@router.get("/user-orders")
def list_user_orders(store=Depends(get_store), admin: User = Depends(require_admin)):
    """All cart orders, newest first."""
    return ok(UserOrderService(store).list())


@router.get("/user-orders/user/{email}")
def list_orders_for_customer(email: str, store=Depends(get_store), current_user: User = Depends(get_current_user)):
    ensure_owner_or_admin(current_user, email)
    return ok(UserOrderService(store).list_for_email(email))


@router.get("/user-orders/{order_id}")
def get_user_order(order_id: int, store=Depends(get_store), current_user: User = Depends(get_current_user)):
    order = UserOrderService(store).get(order_id)
    ensure_owner_or_admin(current_user, order.get("email"))
    return ok(order)


@router.patch("/user-orders/{order_id}/status")
def update_user_order_status(
    order_id: int,
    req: StatusUpdate,
    store=Depends(get_store),
    email_sender=Depends(get_email_sender),
    admin: User = Depends(require_admin),
):
    result = UserOrderWorkflow(store, email_sender).transition(order_id, req.status)
    return transition_response(result, "Order")
