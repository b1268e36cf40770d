from sqlalchemy.orm import Session
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError
from storefront.repos.user_repo import UserRepo
from storefront.domain.schemas import UserCreate, UserRead
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.id)
        if existing:
            return UserRead(id=existing.id, name=existing.name)

        user = UserModel(id=payload.id, name=payload.name)
        created = self.repo.create_user(user)
        return UserRead(id=created.id, name=created.name)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserRead(id=user.id, name=user.name)

    def delete_user(self, user_id: int) -> None:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        # the cart and its items go with the user
        self.repo.delete_user(user)
        logger.info(f"Deleted user {user_id}")
