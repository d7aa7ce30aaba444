"""
Grant or revoke admin access
Adds (or removes) a user in the admins table, looked up by email or user id.

    python app/scripts/grant_admin.py add someone@example.com
    python app/scripts/grant_admin.py remove 6f1c...-uuid
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.database.supabase_client import get_supabase
from supabase import Client
from typing import Optional
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def resolve_user_id(supabase: Client, identifier: str) -> Optional[str]:
    """An email is looked up through the auth admin API; anything else is taken as a user id"""
    if "@" not in identifier:
        return identifier
    users = supabase.auth.admin.list_users(page=1, per_page=1000) or []
    for user in users:
        if (getattr(user, "email", None) or "").lower() == identifier.lower():
            return str(user.id)
    return None


def grant_admin(supabase: Client, user_id: str) -> bool:
    existing = supabase.table("admins")\
        .select("user_id")\
        .eq("user_id", user_id)\
        .execute()
    if existing.data:
        logger.info(f"User {user_id} is already an admin")
        return False
    supabase.table("admins").insert({"user_id": user_id}).execute()
    logger.info(f"Granted admin to {user_id}")
    return True


def revoke_admin(supabase: Client, user_id: str) -> bool:
    result = supabase.table("admins")\
        .delete()\
        .eq("user_id", user_id)\
        .execute()
    removed = bool(result.data)
    if removed:
        logger.info(f"Revoked admin from {user_id}")
    else:
        logger.info(f"User {user_id} was not an admin")
    return removed


def main(argv=None):
    parser = argparse.ArgumentParser(description="Grant or revoke admin access")
    parser.add_argument("action", choices=["add", "remove"])
    parser.add_argument("user", help="user email or id")
    args = parser.parse_args(argv)

    try:
        supabase = get_supabase()
        user_id = resolve_user_id(supabase, args.user)
        if not user_id:
            logger.error(f"No user found for {args.user}")
            sys.exit(1)

        if args.action == "add":
            grant_admin(supabase, user_id)
        else:
            revoke_admin(supabase, user_id)
    except Exception as e:
        logger.error(f"Error updating admins: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
