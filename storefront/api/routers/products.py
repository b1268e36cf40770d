# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import InUseError, NotFoundError
from storefront.domain.schemas import ProductCreate, ProductRead, ProductUpdate
from storefront.repos.user_repo import UserRepo
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


def require_user(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)) -> int:
    if UserRepo(db).get_user(user_id) is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user_id


@router.get("/", response_model=List[ProductRead])
def list_products(db: Session = Depends(get_db)):
    return get_service(db).list_products()


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.find_by_id(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/", response_model=ProductRead, status_code=201)
def create_product(
    payload: ProductCreate,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    return get_service(db).create_product(user_id, payload)


@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_product(user_id, product_id, payload)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_product(user_id, product_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InUseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return Response(status_code=204)
