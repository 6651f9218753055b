"""
Script to expire subscriptions whose paid period has ended.

Each lapsed subscription moves to "expired" and its owner's profile stops
appearing in matches. Safe to run on any schedule.
Run: python -m scripts.expire_subscriptions
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.session import SessionLocal
from app.services.subscription_service import expire_lapsed_subscriptions
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def expire() -> list:
    db = SessionLocal()
    try:
        return expire_lapsed_subscriptions(db)
    finally:
        db.close()


if __name__ == "__main__":
    try:
        user_ids = expire()
    except Exception as e:
        logger.error(f"Expiry sweep failed: {e}", exc_info=True)
        print("\n[ERROR] Failed to expire lapsed subscriptions")
        sys.exit(1)

    print(f"\n[SUCCESS] Expired {len(user_ids)} subscription(s)")
    for user_id in user_ids:
        print(f"   user_id={user_id}")
