from fastapi import APIRouter, Query, status
from schemas.admin_schemas import AdminOut, CleanupReport, CreateAdminRequest, UpdateAdminRequest
from schemas.product_schemas import ProductCreate, ProductOut, ProductUpdate
from schemas.user_schemas import AdminUserUpdate, UserOut
from services.admin_service import AdminService
from services.maintenance_service import MaintenanceService
from utils.deps import admin_dependency, db_dependency
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/admin",
    tags=["admin"]
)


# ---- users ----------------------------------------------------------------

@router.get("/users", response_model=list[UserOut])
async def list_users(admin: admin_dependency, db: db_dependency):
    return AdminService.list_users(db)


@router.get("/users/search", response_model=list[UserOut])
async def search_users(admin: admin_dependency, db: db_dependency,
                       email: str = Query(min_length=1)):
    return AdminService.search_users_by_email(db, email)


@router.put("/users/{user_id}", response_model=UserOut)
async def update_user(user_id: int, body: AdminUserUpdate, admin: admin_dependency, db: db_dependency):
    user = AdminService.update_user(db, user_id, body)

    logger.info("User updated by admin", extra={"user_id": user_id, "admin_id": admin.id})

    return user


@router.patch("/users/{user_id}/deactivate", status_code=status.HTTP_200_OK)
async def deactivate_user(user_id: int, admin: admin_dependency, db: db_dependency):
    AdminService.deactivate_user(db, user_id)

    return {"message": "User deactivated"}


# ---- admins ---------------------------------------------------------------

@router.get("/admins", response_model=list[AdminOut])
async def list_admins(admin: admin_dependency, db: db_dependency):
    return AdminService.list_admins(db)


@router.post("/admins", response_model=AdminOut, status_code=status.HTTP_201_CREATED)
async def create_admin(body: CreateAdminRequest, admin: admin_dependency, db: db_dependency):
    return AdminService.create_admin(db, body)


@router.put("/admins/{admin_id}", response_model=AdminOut)
async def update_admin(admin_id: int, body: UpdateAdminRequest, admin: admin_dependency, db: db_dependency):
    return AdminService.update_admin(db, admin_id, body)


@router.delete("/admins/{admin_id}", status_code=status.HTTP_200_OK)
async def delete_admin(admin_id: int, admin: admin_dependency, db: db_dependency):
    AdminService.delete_admin(db, admin_id)

    logger.info("Admin deleted", extra={"admin_id": admin_id, "deleted_by": admin.id})

    return {"message": "Admin deleted"}


# ---- products -------------------------------------------------------------

@router.get("/products", response_model=list[ProductOut])
async def list_products(admin: admin_dependency, db: db_dependency):
    return AdminService.list_products(db)


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def add_product(body: ProductCreate, admin: admin_dependency, db: db_dependency):
    product = AdminService.add_product(db, body)

    logger.info("Product added", extra={"product_id": product.product_id, "admin_id": admin.id})

    return product


@router.put("/products/{product_id}", response_model=ProductOut)
async def update_product(product_id: int, body: ProductUpdate, admin: admin_dependency, db: db_dependency):
    return AdminService.update_product(db, product_id, body)


@router.delete("/products/{product_id}", status_code=status.HTTP_200_OK)
async def delete_product(product_id: int, admin: admin_dependency, db: db_dependency):
    deleted_id = AdminService.delete_product(db, product_id)

    return {"message": "Product deleted", "productId": deleted_id}


# ---- maintenance ----------------------------------------------------------

@router.post("/maintenance/cleanup", response_model=CleanupReport)
async def run_cleanup(admin: admin_dependency, db: db_dependency):
    """
    Purges expired tokens and codes and abandoned signups.
    """
    return MaintenanceService.cleanup(db)
