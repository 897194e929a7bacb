import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from html import escape
from core.config import settings
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


def send_email(to_email: str, subject: str, body: str):
    # Skip email sending in test environment
    if settings.ENV == "testing":
        logger.info(
            "[TEST MODE] Email skipped",
            extra={"recipient": to_email, "subject": subject}
        )
        return

    logger.debug(
        "Attempting to send email",
        extra={"recipient": to_email, "subject": subject}
    )

    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = settings.MAIL_FROM
    message["To"] = to_email
    message.attach(MIMEText(body, "html"))

    try:
        with smtplib.SMTP(settings.MAIL_SERVER, settings.MAIL_PORT) as server:
            server.starttls()  # Upgrade to secure connection
            server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)
            server.sendmail(settings.MAIL_FROM, to_email, message.as_string())

        logger.info(
            "Email sent successfully",
            extra={"recipient": to_email, "subject": subject}
        )

    except smtplib.SMTPException as e:
        logger.error(
            f"Failed to send email: {str(e)}",
            extra={
                "recipient": to_email,
                "subject": subject,
                "error": str(e),
                "error_type": type(e).__name__
            },
            exc_info=True
        )
        raise


def verification_email(code: str) -> tuple[str, str]:
    subject = "Verify Your Email - Essence Aura"
    body = f"""
    <html>
    <body>
        <h2>Welcome to Essence Aura!</h2>
        <p>Your verification code is:</p>
        <h1 style="color: #4CAF50; font-size: 24px;">{code}</h1>
        <p>Enter this code in the app to finish verifying your email.
        It expires in {settings.VERIFICATION_CODE_EXPIRE_MINUTES} minutes.</p>
        <p>If you didn't request this, please ignore this email.</p>
    </body>
    </html>
    """
    return subject, body


def password_reset_email(code: str) -> tuple[str, str]:
    subject = "Reset Your Password - Essence Aura"
    body = f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <h2 style="color: #2c3e50;">Password Reset Request</h2>
        <p>Your password reset code is:</p>
        <h1 style="color: #3498db; font-size: 24px;">{code}</h1>
        <p style="color: #666; font-size: 14px;">
            This code expires in {settings.VERIFICATION_CODE_EXPIRE_MINUTES} minutes.
            If you didn't request a reset, ignore this email. Your password will remain unchanged.
        </p>
    </body>
    </html>
    """
    return subject, body


def order_confirmation_email(username: str, order_id: int, items: list[dict], total_price) -> tuple[str, str]:
    item_rows = "".join(
        f"<li>{escape(str(item.get('product_name', '')))} - quantity: {item.get('quantity')}, "
        f"price: {item.get('price')}</li>"
        for item in items
    )
    subject = "Essence Aura - Your order has been placed"
    body = f"""
    <html>
    <body>
        <h1>Thank you for your order, {escape(username or '')}.</h1>
        <p>Order number: {order_id}</p>
        <p>Items:</p>
        <ul>{item_rows}</ul>
        <p>Total: {total_price:,}</p>
        <p>We will ship your order as soon as possible.</p>
    </body>
    </html>
    """
    return subject, body
