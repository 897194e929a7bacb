from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from core.exceptions import DatabaseError, NotFoundError
from models.orders import Order
from models.users import User
from schemas.user_schemas import UserInfoUpdate
from utils.logger import get_logger

logger = get_logger(__name__)


class UserService:

    @staticmethod
    def get_user_info(db: Session, user_id: int) -> User:
        user = db.query(User).filter(
            User.user_id == user_id,
            User.is_active == True
        ).one_or_none()

        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def update_user_info(db: Session, user_id: int, body: UserInfoUpdate) -> User:
        user = UserService.get_user_info(db, user_id)

        for field, value in body.model_dump(exclude_unset=True).items():
            setattr(user, field, value)

        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to update user info", extra={"user_id": user_id}, exc_info=True)
            raise DatabaseError("Failed to update user info.") from e

        db.refresh(user)
        logger.info("User info updated", extra={"user_id": user_id})
        return user

    @staticmethod
    def get_orders_by_user(db: Session, user_id: int) -> list[Order]:
        try:
            orders = db.query(Order).filter(Order.user_id == user_id).order_by(Order.order_id.desc()).all()
        except SQLAlchemyError as e:
            logger.error("Failed to load orders", extra={"user_id": user_id}, exc_info=True)
            raise DatabaseError("Failed to load orders.") from e

        if not orders:
            raise NotFoundError("No orders found.")
        return orders
