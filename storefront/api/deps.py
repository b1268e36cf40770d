# storefront/api/deps.py
from fastapi import Cookie, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.cart import Cart
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_identity import CartIdentityResolver, RequestContext
from storefront.utils.settings import CART_COOKIE_NAME, GUEST_CART_RETENTION_DAYS


def set_cart_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        CART_COOKIE_NAME,
        token,
        max_age=GUEST_CART_RETENTION_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
    )


def clear_cart_cookie(response: Response) -> None:
    response.delete_cookie(CART_COOKIE_NAME)


def get_cart_token(cart_token: str | None = Cookie(None, alias=CART_COOKIE_NAME)) -> str | None:
    return cart_token


def get_request_context(
    user_id: int | None = Query(None, gt=0),
    cart_token: str | None = Depends(get_cart_token),
    db: Session = Depends(get_db),
) -> RequestContext:
    if user_id is not None and UserRepo(db).get_user(user_id) is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return RequestContext(user_id=user_id, cart_token=cart_token)


def get_current_cart(
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> Cart:
    resolved = CartIdentityResolver(db).resolve(ctx)
    if resolved.new_token:
        set_cart_cookie(response, resolved.new_token)
    return resolved.cart
