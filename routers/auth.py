from fastapi import APIRouter, BackgroundTasks, Response
from starlette import status
from core.config import settings
from schemas.auth_schemas import (AccessTokenResponse, EmailRequest, FindEmailRequest, LoginRequest,
                                  LoginResponse, PasswordResetVerifyRequest, SignupRequest,
                                  UserInfo, VerifyCodeRequest)
from services.auth_service import AuthService
from utils.deps import db_dependency, refresh_dependency, refresh_token_dependency
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


def set_refresh_cookie(response: Response, refresh_token: str):
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="strict",
        secure=settings.ENV == "production",
        path="/"
    )


def clear_refresh_cookie(response: Response):
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        httponly=True,
        samesite="strict",
        secure=settings.ENV == "production",
        path="/"
    )


# ---- signup ---------------------------------------------------------------

@router.post("/verify-email", status_code=status.HTTP_200_OK)
async def verify_email(body: EmailRequest, db: db_dependency, bg: BackgroundTasks):
    """
    Creates (or reuses) the placeholder user and mails a verification code.
    """
    AuthService.send_verification_email(db, body.email, bg)

    return {"message": "Verification code sent. Please check your email."}


@router.post("/verify-code", status_code=status.HTTP_200_OK)
async def verify_code(body: VerifyCodeRequest, db: db_dependency):
    AuthService.verify_email_code(db, body.email, body.code)

    logger.info("Email verified", extra={"email": body.email})

    return {"message": "Email verified successfully"}


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, db: db_dependency):
    user = AuthService.complete_signup(db, body)

    logger.info(
        "User registered successfully",
        extra={"user_id": user.user_id, "email": user.email}
    )

    return {"message": "Signup completed successfully"}


@router.post("/cancel-signup", status_code=status.HTTP_200_OK)
async def cancel_signup(body: EmailRequest, db: db_dependency):
    AuthService.cancel_signup(db, body.email)

    return {"message": "Signup cancelled"}


@router.post("/check-email", status_code=status.HTTP_200_OK)
async def check_email(body: EmailRequest, db: db_dependency):
    available = AuthService.check_email_availability(db, body.email)

    return {"available": available}


@router.post("/find-email", status_code=status.HTTP_200_OK)
async def find_email(body: FindEmailRequest, db: db_dependency):
    email = AuthService.find_email(db, body.name, body.phone)

    return {"email": email}


# ---- session --------------------------------------------------------------

@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, response: Response, db: db_dependency):
    tokens, info = AuthService.login(db, body.email, body.password, body.is_admin)

    set_refresh_cookie(response, tokens.refresh_token)

    return {
        "message": "Login successful",
        "accessToken": tokens.access_token,
        "userInfo": info
    }


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(response: Response, principal: refresh_dependency, db: db_dependency):
    """
    Revokes every refresh token of the caller and clears the cookie.
    """
    AuthService.logout(db, principal)
    clear_refresh_cookie(response)

    logger.info("Logged out", extra={"principal_id": principal.id, "is_admin": principal.is_admin})

    return {"message": "Logged out successfully"}


@router.get("/refresh-token", response_model=AccessTokenResponse)
async def refresh_token(principal: refresh_dependency, token: refresh_token_dependency, db: db_dependency):
    access_token = AuthService.refresh_access_token(db, token, principal)

    logger.info("Access token refreshed", extra={"principal_id": principal.id})

    return {"message": "Access token refreshed", "accessToken": access_token}


@router.post("/check-auth", response_model=UserInfo)
async def check_auth(principal: refresh_dependency, db: db_dependency):
    return AuthService.check_auth(db, principal)


# ---- password reset -------------------------------------------------------

@router.post("/password-reset/request", status_code=status.HTTP_200_OK)
async def password_reset_request(body: EmailRequest, db: db_dependency, bg: BackgroundTasks):
    AuthService.request_password_reset(db, body.email, bg)

    return {"message": "Password reset code sent. Please check your email."}


@router.post("/password-reset/verify", status_code=status.HTTP_200_OK)
async def password_reset_verify(body: PasswordResetVerifyRequest, db: db_dependency):
    AuthService.reset_password(db, body.email, body.code, body.new_password)

    return {"message": "Password updated successfully. Please login again."}


@router.post("/password-reset/cancel", status_code=status.HTTP_200_OK)
async def password_reset_cancel(body: EmailRequest, db: db_dependency):
    AuthService.cancel_password_reset(db, body.email)

    return {"message": "Password reset cancelled"}
