# storefront/services/cart_identity.py
from dataclasses import dataclass

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.domain.cart import Cart
from storefront.repos.cart_repo import CartRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Who is asking: an authenticated user id, a guest cart token, or neither."""

    user_id: int | None = None
    cart_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


@dataclass(frozen=True)
class ResolvedCart:
    cart: Cart
    # set only when a guest cart was just created; the caller stores it in the session
    new_token: str | None = None


class CartIdentityResolver:
    """
    Decides which cart is "the current cart" for a request.

    Authenticated users always get their own persistent cart. Guests get the
    ownerless cart named by their session token, or a fresh one when the token
    is missing, unknown or points at a cart that has since been given an owner.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self._resolved: dict[RequestContext, ResolvedCart] = {}

    def resolve(self, ctx: RequestContext) -> ResolvedCart:
        if ctx not in self._resolved:
            self._resolved[ctx] = self._resolve(ctx)
        return self._resolved[ctx]

    def _resolve(self, ctx: RequestContext) -> ResolvedCart:
        if ctx.is_authenticated:
            return ResolvedCart(cart=self.find_or_create_user_cart(ctx.user_id))

        if ctx.cart_token:
            model = self.repo.get_cart(ctx.cart_token)
            if model is not None and model.user_id is None:
                return ResolvedCart(cart=Cart(model, self.repo))

            if model is None:
                logger.info(f"Guest cart token {ctx.cart_token} not found, starting a new cart")
            else:
                logger.warning(
                    f"Guest cart token {ctx.cart_token} points at a cart owned by user "
                    f"{model.user_id}, starting a new cart"
                )

        cart = self.create_guest_cart()
        return ResolvedCart(cart=cart, new_token=str(cart.id))

    def find_or_create_user_cart(self, user_id: int) -> Cart:
        model = self.repo.get_cart_by_user(user_id)
        if model is None:
            model = self.repo.create_cart(CartModel(user_id=user_id, cart_items_count=0))
            logger.info(f"Created cart {model.id} for user {user_id}")
        return Cart(model, self.repo)

    def create_guest_cart(self) -> Cart:
        model = self.repo.create_cart(CartModel(user_id=None, cart_items_count=0))
        logger.info(f"Created guest cart {model.id}")
        return Cart(model, self.repo)
