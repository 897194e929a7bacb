from fastapi import APIRouter, BackgroundTasks, status
from schemas.order_schemas import CreateOrderRequest, PaymentRequest
from services.order_service import OrderService
from utils.deps import db_dependency, user_dependency


router = APIRouter(
    prefix="/order",
    tags=["order"]
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(body: CreateOrderRequest, principal: user_dependency, db: db_dependency,
                       bg: BackgroundTasks):
    order_id = OrderService.create_order(db, principal.id, body, bg)

    return {"message": "Order created", "orderId": order_id}


@router.post("/payments", status_code=status.HTTP_201_CREATED)
async def process_payment(body: PaymentRequest, principal: user_dependency, db: db_dependency):
    payment_id = OrderService.process_payment(db, principal.id, body)

    return {"message": "Payment processed successfully", "paymentId": payment_id}
