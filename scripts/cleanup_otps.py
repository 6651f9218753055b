"""
Script to delete expired email OTP records.
Run: python -m scripts.cleanup_otps
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.session import SessionLocal
from app.services.otp_service import cleanup_expired_otps
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def cleanup() -> int:
    db = SessionLocal()
    try:
        return cleanup_expired_otps(db)
    finally:
        db.close()


if __name__ == "__main__":
    try:
        deleted = cleanup()
    except Exception as e:
        logger.error(f"OTP cleanup failed: {e}", exc_info=True)
        print("\n[ERROR] Failed to clean up expired OTPs")
        sys.exit(1)

    print(f"\n[SUCCESS] Deleted {deleted} expired OTP record(s)")
