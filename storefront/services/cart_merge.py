# storefront/services/cart_merge.py
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.cart import Cart
from storefront.services.cart_identity import CartIdentityResolver, RequestContext
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class MergeStatus(str, Enum):
    MERGED = "merged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class MergeResult:
    status: MergeStatus
    merged_items: int = 0
    # whether the caller must drop the guest token from the session
    clear_token: bool = False
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status != MergeStatus.FAILED


class CartMergeService:
    """
    Folds a guest cart into the user's persistent cart right after login or
    registration, then destroys the guest cart.

    Quantities are additive: a product present in both carts ends up with
    the sum. Failures are reported, never raised, so a broken cart can not
    block authentication.
    """

    def __init__(self, db: Session, resolver: CartIdentityResolver | None = None):
        self.resolver = resolver or CartIdentityResolver(db)
        self.repo = self.resolver.repo

    def merge_guest_cart_into_user(self, ctx: RequestContext) -> MergeResult:
        if not ctx.cart_token or not ctx.is_authenticated:
            return MergeResult(MergeStatus.SKIPPED, reason="nothing to merge")

        try:
            guest_model = self.repo.get_cart(ctx.cart_token)

            if guest_model is None:
                return MergeResult(MergeStatus.SKIPPED, reason="guest cart not found")
            if guest_model.user_id is not None:
                return MergeResult(MergeStatus.SKIPPED, reason="cart already has an owner")

            guest = Cart(guest_model, self.repo)
            if guest.is_empty():
                return MergeResult(MergeStatus.SKIPPED, reason="guest cart is empty")

            user_cart = self.resolver.find_or_create_user_cart(ctx.user_id)
            before = user_cart.total_items()

            user_cart.merge_with(guest)
            moved = user_cart.total_items() - before
            self.repo.delete_cart(guest.id)
            self.repo.commit()

        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.exception(f"Merging guest cart {ctx.cart_token} into user {ctx.user_id} failed: {e}")
            return MergeResult(MergeStatus.FAILED, clear_token=True, reason=str(e))

        logger.info(
            f"Merged guest cart {ctx.cart_token} ({moved} items) into cart {user_cart.id} "
            f"of user {ctx.user_id}"
        )
        return MergeResult(MergeStatus.MERGED, merged_items=moved, clear_token=True)
