from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from core.exceptions import DatabaseError, NotFoundError
from models.orders import Order
from models.payments import Payment
from models.users import User
from schemas.order_schemas import CreateOrderRequest, PaymentRequest
from services.email_service import send_email, order_confirmation_email
from utils.logger import get_logger

logger = get_logger(__name__)


class OrderService:

    @staticmethod
    def create_order(db: Session, user_id: int, body: CreateOrderRequest, bg: BackgroundTasks) -> int:
        """
        Stores a PENDING order for the user and mails a confirmation.

        Returns:
            The new order id
        """
        user = db.query(User).filter(User.user_id == user_id).one_or_none()
        if not user:
            raise NotFoundError("User not found")

        items = [item.model_dump() for item in body.items]
        order = Order(
            user_id=user_id,
            total_price=body.total_price,
            discount_amount=body.discount_amount,
            delivery_address=body.delivery_address,
            order_items=items,
            status="PENDING"
        )
        try:
            db.add(order)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to create order", extra={"user_id": user_id}, exc_info=True)
            raise DatabaseError("Failed to create order.") from e

        db.refresh(order)

        subject, email_body = order_confirmation_email(user.username, order.order_id, items, body.total_price)
        bg.add_task(send_email, to_email=user.email, subject=subject, body=email_body)

        logger.info("Order created", extra={"user_id": user_id, "order_id": order.order_id})
        return order.order_id

    @staticmethod
    def process_payment(db: Session, user_id: int, body: PaymentRequest) -> int:
        """Records a successful payment against one of the user's orders."""
        order = db.query(Order).filter(
            Order.order_id == body.order_id,
            Order.user_id == user_id
        ).one_or_none()
        if not order:
            raise NotFoundError("Order not found")

        payment = Payment(
            order_id=order.order_id,
            amount=body.amount,
            payment_method=body.payment_method,
            payment_status="SUCCESS"
        )
        try:
            db.add(payment)
            order.status = "PAID"
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to process payment", extra={"order_id": body.order_id}, exc_info=True)
            raise DatabaseError("Failed to process payment.") from e

        db.refresh(payment)
        logger.info(
            "Payment processed",
            extra={"order_id": order.order_id, "payment_id": payment.payment_id}
        )
        return payment.payment_id
