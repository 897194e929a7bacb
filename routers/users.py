from fastapi import APIRouter, status
from schemas.order_schemas import OrderOut
from schemas.user_schemas import UserInfoUpdate, UserOut
from services.user_service import UserService
from utils.deps import db_dependency, user_dependency
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/user",
    tags=["user"]
)


@router.get("/me", response_model=UserOut, status_code=status.HTTP_200_OK)
async def get_user_info(principal: user_dependency, db: db_dependency):
    """
    Get current user info (protected endpoint).
    """
    return UserService.get_user_info(db, principal.id)


@router.put("/me", response_model=UserOut, status_code=status.HTTP_200_OK)
async def update_user_info(body: UserInfoUpdate, principal: user_dependency, db: db_dependency):
    return UserService.update_user_info(db, principal.id, body)


@router.get("/me/orders", response_model=list[OrderOut], status_code=status.HTTP_200_OK)
async def get_my_orders(principal: user_dependency, db: db_dependency):
    return UserService.get_orders_by_user(db, principal.id)
