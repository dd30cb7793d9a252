"""Campus shop: products, single-product orders and cart orders."""
from typing import Any, Dict, List, Optional

from campus_suite.core.logging import get_logger
from campus_suite.domain.shop import OrderCreate, OrderStatus, ProductCreate, ProductUpdate, UserOrderCreate
from campus_suite.services.entities import EntityRepository
from campus_suite.utils.text import normalize_email

logger = get_logger(__name__)


def _newest_first(documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(documents, key=lambda d: d.get("created_at", ""), reverse=True)


class ProductService:
    def __init__(self, store):
        self.repository = EntityRepository(store, "products")

    def create(self, request: ProductCreate) -> Dict[str, Any]:
        return self.repository.create(request.model_dump(mode="json"))

    def list(self) -> List[Dict[str, Any]]:
        return self.repository.list()

    def types(self) -> List[str]:
        return sorted({p["product_type"] for p in self.repository.list() if p.get("product_type")})

    def brands(self) -> List[str]:
        return sorted({p["product_brand"] for p in self.repository.list() if p.get("product_brand")})

    def filter(
        self,
        product_type: Optional[str] = None,
        brand: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Products matching every given criterion, in product id order.

        ``search`` is a case-insensitive substring match on the name.
        """
        needle = search.lower() if search else None
        return [
            p for p in self.repository.list()
            if (not product_type or p.get("product_type") == product_type)
            and (not brand or p.get("product_brand") == brand)
            and (not needle or needle in p.get("name", "").lower())
        ]

    def get(self, product_id: int) -> Dict[str, Any]:
        return self.repository.get(product_id)

    def update(self, product_id: int, request: ProductUpdate) -> Dict[str, Any]:
        fields = request.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if not fields:
            return self.repository.get(product_id)
        return self.repository.update(product_id, fields)

    def delete(self, product_id: int) -> Dict[str, Any]:
        return self.repository.delete(product_id)


class OrderService:
    """Single-product orders."""

    def __init__(self, store):
        self.repository = EntityRepository(store, "orders")

    def create(self, request: OrderCreate) -> Dict[str, Any]:
        payload = request.model_dump(mode="json")
        payload["email"] = normalize_email(payload["email"])
        return self.repository.create(payload)

    def list(self) -> List[Dict[str, Any]]:
        return self.repository.list()


class UserOrderService:
    """Cart orders. Status changes go through ``UserOrderWorkflow``."""

    def __init__(self, store):
        self.repository = EntityRepository(store, "user_orders")

    def place(self, request: UserOrderCreate) -> Dict[str, Any]:
        payload = request.model_dump(mode="json")
        payload["email"] = normalize_email(payload["email"])
        payload["status"] = OrderStatus.PENDING.value

        order = self.repository.create(payload)
        logger.info(
            f"Order {order['order_id']} placed with {len(order['items'])} item(s)",
            extra={"collection": "user_orders", "identifier": order["order_id"]},
        )
        return order

    def list(self) -> List[Dict[str, Any]]:
        return _newest_first(self.repository.list())

    def list_for_email(self, email: str) -> List[Dict[str, Any]]:
        return _newest_first(self.repository.find_by(email=normalize_email(email)))

    def get(self, order_id: int) -> Dict[str, Any]:
        return self.repository.get(order_id)
