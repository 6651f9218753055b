"""
Outbound email for one-time passcodes.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from app.core import config
from app.core.errors import DeliveryError, UnavailableError

logger = logging.getLogger(__name__)

FROM_NAME = "Doula Connect"


class EmailSender:
    """SMTP sender, constructed once at start-up and injected into routes."""

    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        from_email: str = "noreply@doulaconnect.com",
        starttls: bool = True,
        timeout: int = 15,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email
        self.starttls = starttls
        self.timeout = timeout

    @classmethod
    def from_config(cls) -> "EmailSender":
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            user=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            from_email=config.SMTP_FROM,
            starttls=config.SMTP_STARTTLS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.host)

    def send_otp(self, to_email: str, otp_code: str, expires_minutes: int = 10) -> None:
        """
        Send a verification code.

        Raises:
            UnavailableError: SMTP is not configured
            DeliveryError: the SMTP server refused or could not be reached
        """
        if not self.configured:
            raise UnavailableError("Email delivery is not configured")

        text_body = (
            f"Your Doula Connect verification code is: {otp_code}\n\n"
            f"This code will expire in {expires_minutes} minutes.\n\n"
            "If you did not request this code, please ignore this email."
        )
        html_body = f"""
        <h2>Doula Connect Verification</h2>
        <p>Your verification code for Doula Connect is:</p>
        <p style="font-size:32px;font-weight:bold;letter-spacing:5px;font-family:monospace">{otp_code}</p>
        <p>This code will expire in {expires_minutes} minutes.</p>
        <p>If you did not request this verification code, please ignore this email.</p>
        """

        msg = MIMEMultipart("alternative")
        msg["Subject"] = "Your Doula Connect Verification Code"
        msg["From"] = formataddr((FROM_NAME, self.from_email))
        msg["To"] = to_email
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.starttls:
                    server.starttls()
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.sendmail(self.from_email, [to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send OTP email: to={to_email}, error={e}")
            raise DeliveryError() from e

        logger.info(f"OTP email sent: to={to_email}")
