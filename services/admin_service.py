from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from core.exceptions import DatabaseError, NotFoundError, ResourceConflictError
from core.principal import Principal
from models.admins import Admin
from models.products import Product
from models.users import User
from schemas.admin_schemas import CreateAdminRequest, UpdateAdminRequest
from schemas.product_schemas import ProductCreate, ProductUpdate
from schemas.user_schemas import AdminUserUpdate
from services.token_service import TokenService
from utils.hashing import get_password_hash
from utils.logger import get_logger

logger = get_logger(__name__)


def final_price(price: float, discount_rate: float) -> float:
    return round(float(price) * (1 - float(discount_rate) / 100), 2)


class AdminService:
    """
    Back-office operations on users, admins and products.

    Store failures surface as DatabaseError; NotFoundError and
    ResourceConflictError pass through untouched.
    """

    # ---- users -----------------------------------------------------------

    @staticmethod
    def list_users(db: Session) -> list[User]:
        try:
            return db.query(User).filter(User.is_active == True).order_by(User.user_id).all()
        except SQLAlchemyError as e:
            logger.error("Failed to list users", exc_info=True)
            raise DatabaseError("Failed to load users.") from e

    @staticmethod
    def search_users_by_email(db: Session, keyword: str) -> list[User]:
        try:
            users = db.query(User).filter(
                User.email.contains(keyword, autoescape=True),
                User.is_active == True
            ).order_by(User.user_id).all()
        except SQLAlchemyError as e:
            logger.error("Failed to search users", extra={"keyword": keyword}, exc_info=True)
            raise DatabaseError("Failed to search users.") from e

        if not users:
            raise NotFoundError("No users match the search.")
        return users

    @staticmethod
    def _get_user(db: Session, user_id: int) -> User:
        user = db.query(User).filter(User.user_id == user_id).one_or_none()
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def update_user(db: Session, user_id: int, body: AdminUserUpdate) -> User:
        try:
            user = AdminService._get_user(db, user_id)
            changes = body.model_dump(exclude_unset=True)
            if "email" in changes and db.query(User.user_id).filter(
                User.email == changes["email"], User.user_id != user_id
            ).first():
                raise ResourceConflictError("Email address is already in use.")

            for field, value in changes.items():
                setattr(user, field, value)
            db.commit()
            if changes.get("is_active") is False:
                TokenService.invalidate_refresh_tokens(db, Principal.user(user_id))
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to update user", extra={"user_id": user_id}, exc_info=True)
            raise DatabaseError("Failed to update user.") from e

        db.refresh(user)
        return user

    @staticmethod
    def deactivate_user(db: Session, user_id: int) -> None:
        """Deactivates the account and ends all of its sessions."""
        try:
            user = AdminService._get_user(db, user_id)
            user.is_active = False
            db.commit()
            TokenService.invalidate_refresh_tokens(db, Principal.user(user_id))
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to deactivate user", extra={"user_id": user_id}, exc_info=True)
            raise DatabaseError("Failed to deactivate user.") from e

        logger.info("User deactivated", extra={"user_id": user_id})

    # ---- admins ----------------------------------------------------------

    @staticmethod
    def list_admins(db: Session) -> list[Admin]:
        try:
            return db.query(Admin).order_by(Admin.admin_id).all()
        except SQLAlchemyError as e:
            logger.error("Failed to list admins", exc_info=True)
            raise DatabaseError("Failed to load admins.") from e

    @staticmethod
    def _ensure_admin_email_free(db: Session, email: str, exclude_id: int | None = None) -> None:
        query = db.query(Admin.admin_id).filter(Admin.email == email)
        if exclude_id is not None:
            query = query.filter(Admin.admin_id != exclude_id)
        if query.first():
            raise ResourceConflictError("Email address is already in use.")

    @staticmethod
    def create_admin(db: Session, body: CreateAdminRequest) -> Admin:
        try:
            AdminService._ensure_admin_email_free(db, body.email)

            admin = Admin(
                username=body.username,
                email=body.email,
                password_hash=get_password_hash(body.password)
            )
            db.add(admin)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to create admin", extra={"email": body.email}, exc_info=True)
            raise DatabaseError("Failed to create admin.") from e

        db.refresh(admin)
        logger.info("Admin created", extra={"admin_id": admin.admin_id})
        return admin

    @staticmethod
    def update_admin(db: Session, admin_id: int, body: UpdateAdminRequest) -> Admin:
        try:
            admin = db.query(Admin).filter(Admin.admin_id == admin_id).one_or_none()
            if not admin:
                raise NotFoundError("Admin not found")

            changes = body.model_dump(exclude_unset=True)
            if "email" in changes:
                AdminService._ensure_admin_email_free(db, changes["email"], exclude_id=admin_id)
            if "password" in changes:
                admin.password_hash = get_password_hash(changes.pop("password"))
            for field, value in changes.items():
                setattr(admin, field, value)

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to update admin", extra={"admin_id": admin_id}, exc_info=True)
            raise DatabaseError("Failed to update admin.") from e

        db.refresh(admin)
        return admin

    @staticmethod
    def delete_admin(db: Session, admin_id: int) -> None:
        try:
            deleted = db.query(Admin).filter(Admin.admin_id == admin_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to delete admin", extra={"admin_id": admin_id}, exc_info=True)
            raise DatabaseError("Failed to delete admin.") from e

        if not deleted:
            raise NotFoundError("Admin not found")

    # ---- products --------------------------------------------------------

    @staticmethod
    def list_products(db: Session) -> list[Product]:
        try:
            return db.query(Product).order_by(Product.product_id).all()
        except SQLAlchemyError as e:
            logger.error("Failed to list products", exc_info=True)
            raise DatabaseError("Failed to load products.") from e

    @staticmethod
    def add_product(db: Session, body: ProductCreate) -> Product:
        data = body.model_dump()
        product = Product(**data, final_price=final_price(data["price"], data["discount_rate"]))
        try:
            db.add(product)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to add product", extra={"product_name": body.name}, exc_info=True)
            raise DatabaseError("Failed to add product.") from e

        db.refresh(product)
        return product

    @staticmethod
    def update_product(db: Session, product_id: int, body: ProductUpdate) -> Product:
        try:
            product = db.query(Product).filter(Product.product_id == product_id).one_or_none()
            if not product:
                raise NotFoundError("Product not found")

            for field, value in body.model_dump(exclude_unset=True).items():
                setattr(product, field, value)
            product.final_price = final_price(product.price, product.discount_rate)

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to update product", extra={"product_id": product_id}, exc_info=True)
            raise DatabaseError("Failed to update product.") from e

        db.refresh(product)
        return product

    @staticmethod
    def delete_product(db: Session, product_id: int) -> int:
        try:
            deleted = db.query(Product).filter(Product.product_id == product_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to delete product", extra={"product_id": product_id}, exc_info=True)
            raise DatabaseError("Failed to delete product.") from e

        if not deleted:
            raise NotFoundError("Product not found")
        return product_id
