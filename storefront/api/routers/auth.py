from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.deps import clear_cart_cookie, get_cart_token
from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import LoginIn, LoginOut
from storefront.services.cart_identity import CartIdentityResolver, RequestContext
from storefront.services.cart_merge import CartMergeService
from storefront.services.user_service import UserService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginOut)
def login(
    payload: LoginIn,
    response: Response,
    cart_token: str | None = Depends(get_cart_token),
    db: Session = Depends(get_db),
):
    """
    Signs the user in and folds the guest cart into their cart.
    A failed merge is logged and never blocks the login.
    """
    try:
        user = UserService(db).get_user(payload.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    resolver = CartIdentityResolver(db)
    ctx = RequestContext(user_id=user.id, cart_token=cart_token)

    result = CartMergeService(db, resolver).merge_guest_cart_into_user(ctx)
    if not result.ok:
        logger.error(f"Cart merge at login of user {user.id} failed: {result.reason}")
    if result.clear_token:
        clear_cart_cookie(response)

    cart = resolver.resolve(ctx).cart
    return {
        "user": user,
        "cart_count": cart.total_items(),
        "merge": {"status": result.status.value, "merged_items": result.merged_items},
    }
