import os

# ✅ Environment
APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# Empty disables the rotating log file
LOG_DIR = os.getenv("LOG_DIR", "logs")

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./doula_connect.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Frontend / CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:8081")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:8081,http://localhost:19006").split(",")
    if origin.strip()
]

# ✅ Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
STRIPE_PRICE_ID_PARENT_ANNUAL = os.getenv("STRIPE_PRICE_ID_PARENT_ANNUAL")
STRIPE_PRICE_ID_DOULA_MONTHLY = os.getenv("STRIPE_PRICE_ID_DOULA_MONTHLY")

# ✅ SMTP (OTP delivery)
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_FROM = os.getenv("SMTP_FROM", "noreply@doulaconnect.com")
SMTP_STARTTLS = os.getenv("SMTP_STARTTLS", "1") == "1"

# ✅ OTP send throttling (per client IP)
OTP_SEND_MAX_REQUESTS = int(os.getenv("OTP_SEND_MAX_REQUESTS", "5"))
OTP_SEND_WINDOW_SECONDS = int(os.getenv("OTP_SEND_WINDOW_SECONDS", "600"))
