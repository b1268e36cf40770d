# storefront/domain/cart.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import InvalidQuantityError
from storefront.repos.cart_repo import CartRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Guest:
    token: str


@dataclass(frozen=True)
class Owned:
    user_id: int


CartOwnership = Union[Guest, Owned]


def _check_quantity(quantity, positive: bool = True) -> int:
    # bool is an int subclass, True must not mean "one"
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(f"Quantity must be an integer, got {quantity!r}")
    if positive and quantity <= 0:
        raise InvalidQuantityError(f"Quantity must be greater than 0, got {quantity}")
    return quantity


class Cart:
    """
    Aggregate over one persisted cart and its items.

    Every mutation keeps ``cart_items_count`` equal to the sum of item
    quantities. Methods flush but do not commit: the caller owns the
    transaction, so the counter and the item rows are written together.
    """

    def __init__(self, model: CartModel, repo: CartRepo):
        self.model = model
        self.repo = repo

    def __repr__(self):
        return f"<Cart {self.id} {self.ownership!r} items={self.total_items()}>"

    @property
    def id(self):
        return self.model.id

    @property
    def owner(self) -> int | None:
        return self.model.user_id

    @property
    def ownership(self) -> CartOwnership:
        if self.model.user_id is None:
            return Guest(token=str(self.model.id))
        return Owned(user_id=self.model.user_id)

    @property
    def items(self) -> list[CartItemModel]:
        return self.repo.get_cart_items(self.id)

    #query
    def total_price(self) -> Decimal:
        # current product price, not the price at the time of adding
        return sum(
            (item.quantity * item.product.price for item in self.items if item.product is not None),
            Decimal("0.00"),
        )

    def total_items(self) -> int:
        return self.model.cart_items_count or 0

    def is_empty(self) -> bool:
        return self.total_items() == 0

    #commands
    def add_product(self, product: ProductModel, quantity: int = 1) -> CartItemModel:
        quantity = _check_quantity(quantity)

        item = self.repo.get_cart_item(self.id, product.id)
        if item:
            item.quantity += quantity
        else:
            item = CartItemModel(cart_id=self.id, product_id=product.id, quantity=quantity)
            self.repo.add_cart_item(item)

        self._shift_count(quantity)
        self.repo.flush()
        return item

    def remove_product(self, product: ProductModel) -> bool:
        item = self.repo.get_cart_item(self.id, product.id)
        if not item:
            return False

        self._drop(item)
        self.repo.flush()
        return True

    def update_quantity(self, product: ProductModel, quantity: int) -> bool:
        quantity = _check_quantity(quantity, positive=False)

        item = self.repo.get_cart_item(self.id, product.id)
        if not item:
            return False

        if quantity <= 0:
            self._drop(item)
        else:
            self._shift_count(quantity - item.quantity)
            item.quantity = quantity

        self.repo.flush()
        return True

    def decrement_product(self, product: ProductModel, quantity: int = 1) -> bool:
        quantity = _check_quantity(quantity)

        item = self.repo.get_cart_item(self.id, product.id)
        if not item:
            return False

        if item.quantity <= quantity:
            self._drop(item)
        else:
            item.quantity -= quantity
            self._shift_count(-quantity)

        self.repo.flush()
        return True

    def clear(self) -> None:
        self.repo.delete_cart_items(self.id)
        self.model.cart_items_count = 0
        self.repo.flush()

    def merge_with(self, other) -> bool:
        if not isinstance(other, Cart) or other.id == self.id:
            return False

        for item in other.items:
            if item.product is None:
                logger.warning(
                    f"Skipping item for missing product {item.product_id} while merging cart {other.id}"
                )
                continue
            self.add_product(item.product, item.quantity)

        return True

    def _drop(self, item: CartItemModel) -> None:
        self._shift_count(-item.quantity)
        self.repo.delete_cart_item(item)

    def _shift_count(self, delta: int) -> None:
        self.model.cart_items_count = self.total_items() + delta
