from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.deps import clear_cart_cookie, get_cart_token
from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import UserCreate, UserRead
from storefront.services.cart_identity import RequestContext
from storefront.services.cart_merge import CartMergeService
from storefront.services.user_service import UserService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead)
def create_user(
    payload: UserCreate,
    response: Response,
    cart_token: str | None = Depends(get_cart_token),
    db: Session = Depends(get_db),
):
    """
    Registers the user and signs them in, carrying over the guest cart.
    """
    user = UserService(db).create_user(payload)

    result = CartMergeService(db).merge_guest_cart_into_user(
        RequestContext(user_id=user.id, cart_token=cart_token)
    )
    if not result.ok:
        logger.error(f"Cart merge after registration of user {user.id} failed: {result.reason}")
    if result.clear_token:
        clear_cart_cookie(response)
    return user

@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        service.delete_user(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
