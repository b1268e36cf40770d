# storefront/repos/cart_repo.py
import uuid
from datetime import datetime

from sqlalchemy import select, func, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


def parse_token(token) -> uuid.UUID | None:
    if isinstance(token, uuid.UUID):
        return token
    try:
        return uuid.UUID(str(token))
    except (TypeError, ValueError):
        return None


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    #carts
    def get_cart(self, cart_id) -> CartModel | None:
        key = parse_token(cart_id)
        if key is None:
            return None
        return self.db.get(CartModel, key)

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        if cart.cart_items_count is None:
            cart.cart_items_count = 0
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def delete_cart(self, cart_id) -> None:
        # items first, the foreign key cascade is not relied on here
        self.db.execute(
            delete(CartItemModel).where(CartItemModel.cart_id == cart_id)
        )
        self.db.execute(delete(CartModel).where(CartModel.id == cart_id))

    def purge_guest_carts(self, cutoff: datetime) -> int:
        ids = self.db.execute(
            select(CartModel.id).where(
                CartModel.user_id.is_(None),
                CartModel.created_at < cutoff,
            )
        ).scalars().all()

        if not ids:
            return 0

        self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id.in_(ids)))
        self.db.execute(delete(CartModel).where(CartModel.id.in_(ids)))
        self.db.commit()
        return len(ids)

    #items
    def get_cart_items(self, cart_id) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars()
        )

    def get_cart_item(self, cart_id, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> None:
        self.db.add(item)

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)

    def delete_cart_items(self, cart_id) -> None:
        self.db.execute(
            delete(CartItemModel).where(CartItemModel.cart_id == cart_id)
        )

    def sum_quantities(self, cart_id) -> int:
        return self.db.execute(
            select(func.coalesce(func.sum(CartItemModel.quantity), 0)).where(
                CartItemModel.cart_id == cart_id
            )
        ).scalar_one()

    def count_items_for_product(self, product_id: int) -> int:
        return self.db.execute(
            select(func.count(CartItemModel.id)).where(CartItemModel.product_id == product_id)
        ).scalar_one()

    #transactions
    def flush(self):
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
