from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.cart import Cart
from storefront.domain.errors import NotFoundError, PersistenceError
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases for the current cart.

    The query (view) only reads; each command loads the product, mutates the
    cart aggregate and commits once. Storage faults are rolled back and
    re-raised as PersistenceError.
    """

    def __init__(self, db: Session, cart: Cart):
        self.cart = cart
        self.repo = cart.repo
        self.products = ProductRepo(db)

    #query
    def view(self) -> Dict[str, Any]:
        items = []
        for i in self.cart.items:
            if i.product is None:
                continue
            items.append(
                {
                    "product_id": i.product_id,
                    "title": i.product.title,
                    "quantity": i.quantity,
                    "price": i.product.price,
                    "line_total": i.quantity * i.product.price,
                }
            )

        return {
            "cart_id": str(self.cart.id),
            "user_id": self.cart.owner,
            "items": items,
            "total_items": self.cart.total_items(),
            "total_price": self.cart.total_price(),
        }

    #commands
    def add_item(self, product_id: int, quantity: int) -> Dict[str, Any]:
        product = self._product(product_id)
        self._commit(lambda: self.cart.add_product(product, quantity))
        logger.info(f"Added {quantity} x product {product_id} to cart {self.cart.id}")
        return self._reply("Item added to cart")

    def update_item(self, product_id: int, quantity: int) -> Dict[str, Any] | None:
        product = self._product(product_id)
        if not self._commit(lambda: self.cart.update_quantity(product, quantity)):
            return None
        return self._reply("Cart updated")

    def decrement_item(self, product_id: int, quantity: int) -> Dict[str, Any] | None:
        product = self._product(product_id)
        if not self._commit(lambda: self.cart.decrement_product(product, quantity)):
            return None
        return self._reply("Item quantity decreased")

    def remove_item(self, product_id: int) -> Dict[str, Any] | None:
        product = self._product(product_id)
        if not self._commit(lambda: self.cart.remove_product(product)):
            return None
        logger.info(f"Removed product {product_id} from cart {self.cart.id}")
        return self._reply("Item removed from cart")

    def empty(self) -> Dict[str, Any]:
        self._commit(self.cart.clear)
        logger.info(f"Emptied cart {self.cart.id}")
        return {
            "status": "success",
            "cart_count": 0,
            "cart_total": Decimal("0.00"),
            "message": "Cart emptied",
        }

    def _product(self, product_id: int):
        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def _commit(self, operation):
        try:
            result = operation()
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Cart {self.cart.id} write failed: {e}")
            raise PersistenceError("Unable to update cart") from e
        return result

    def _reply(self, message: str) -> Dict[str, Any]:
        return {
            "status": "success",
            "cart_count": self.cart.total_items(),
            "cart_total": self.cart.total_price(),
            "message": message,
        }
