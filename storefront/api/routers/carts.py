#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_cart
from storefront.data.database import get_db
from storefront.domain.cart import Cart
from storefront.domain.errors import NotFoundError, PersistenceError
from storefront.domain.schemas import (
    CartActionOut,
    CartOut,
    DecrementIn,
    ItemIn,
    QuantityIn,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session = Depends(get_db), cart: Cart = Depends(get_current_cart)):
    return CartService(db=db, cart=cart)


#errors are answered with the action payload on the same response, so a freshly set guest cookie survives
def error_reply(response: Response, svc: CartService, status_code: int, message: str):
    response.status_code = status_code
    return {
        "status": "error",
        "cart_count": svc.cart.total_items(),
        "message": message,
    }


@router.get("", response_model=CartOut)
def show_cart(svc: CartService = Depends(get_service)):
    return svc.view()


@router.delete("", response_model=CartActionOut)
def empty_cart(response: Response, svc: CartService = Depends(get_service)):
    try:
        return svc.empty()
    except PersistenceError as e:
        return error_reply(response, svc, 500, str(e))


@router.post("/items", response_model=CartActionOut)
def add_item(payload: ItemIn, response: Response, svc: CartService = Depends(get_service)):
    try:
        return svc.add_item(payload.product_id, payload.quantity)
    except NotFoundError as e:
        return error_reply(response, svc, 404, str(e))
    except PersistenceError as e:
        return error_reply(response, svc, 500, str(e))
    except ValueError as e:
        return error_reply(response, svc, 400, str(e))


@router.patch("/items/{product_id}", response_model=CartActionOut)
def update_item(
    product_id: int,
    payload: QuantityIn,
    response: Response,
    svc: CartService = Depends(get_service),
):
    try:
        reply = svc.update_item(product_id, payload.quantity)
    except NotFoundError as e:
        return error_reply(response, svc, 404, str(e))
    except PersistenceError as e:
        return error_reply(response, svc, 500, str(e))
    except ValueError as e:
        return error_reply(response, svc, 400, str(e))

    if reply is None:
        return error_reply(response, svc, 404, "Unable to update cart")
    return reply


@router.post("/items/{product_id}/decrement", response_model=CartActionOut)
def decrement_item(
    product_id: int,
    response: Response,
    payload: DecrementIn | None = None,
    svc: CartService = Depends(get_service),
):
    quantity = payload.quantity if payload else 1
    try:
        reply = svc.decrement_item(product_id, quantity)
    except NotFoundError as e:
        return error_reply(response, svc, 404, str(e))
    except PersistenceError as e:
        return error_reply(response, svc, 500, str(e))
    except ValueError as e:
        return error_reply(response, svc, 400, str(e))

    if reply is None:
        return error_reply(response, svc, 404, "Product not found in cart")
    return reply


@router.delete("/items/{product_id}", response_model=CartActionOut)
def remove_item(product_id: int, response: Response, svc: CartService = Depends(get_service)):
    try:
        reply = svc.remove_item(product_id)
    except NotFoundError as e:
        return error_reply(response, svc, 404, str(e))
    except PersistenceError as e:
        return error_reply(response, svc, 500, str(e))

    if reply is None:
        return error_reply(response, svc, 404, "Product not found in cart")
    return reply
