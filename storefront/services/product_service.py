# storefront/services/product_service.py
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import InUseError, NotFoundError
from storefront.domain.schemas import ProductCreate, ProductUpdate
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """Product catalog: lookup for the cart, plus owner-only listing management."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.cart_repo = CartRepo(db)

    def find_by_id(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def list_products(self) -> list[ProductModel]:
        return self.repo.list_products()

    def create_product(self, user_id: int, payload: ProductCreate) -> ProductModel:
        product = ProductModel(user_id=user_id, **payload.model_dump())
        created = self.repo.create_product(product)
        logger.info(f"User {user_id} listed product {created.id}")
        return created

    def update_product(self, user_id: int, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self._owned(user_id, product_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(product, field, value)
        return self.repo.save(product)

    def delete_product(self, user_id: int, product_id: int) -> None:
        product = self._owned(user_id, product_id)

        in_carts = self.cart_repo.count_items_for_product(product_id)
        if in_carts:
            logger.warning(f"Refusing to delete product {product_id}, it is in {in_carts} cart(s)")
            raise InUseError(f"Product {product_id} is still in {in_carts} cart(s)")

        self.repo.delete_product(product)
        logger.info(f"Product {product_id} deleted by user {user_id}")

    def _owned(self, user_id: int, product_id: int) -> ProductModel:
        product = self.find_by_id(product_id)
        if product.user_id != user_id:
            raise PermissionError("You are not authorized to perform this action")
        return product
