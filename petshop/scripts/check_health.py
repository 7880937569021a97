"""Health Check Script - Store and session backend connectivity.

Usage:
    python -m petshop.scripts.check_health
"""

import asyncio
import sys

import redis.asyncio as redis
from dotenv import load_dotenv

from petshop.config.settings import get_settings
from petshop.services.supabase import SupabaseService, Table

# Load environment variables
load_dotenv()


async def check_store(store: SupabaseService) -> bool:
    print("1. Testing Database Connection...")
    try:
        counts = {table.value: await store.count(table) for table in Table}
    except Exception as e:
        print(f"[ERROR] Database Connection Failed: {e}")
        return False

    print("[OK] Connection Successful.")
    for table, count in counts.items():
        print(f"   - {table}: {count}")
    return True


async def check_pending_reminders(store: SupabaseService) -> None:
    print("\n2. Checking Pending Reminders...")
    try:
        pending = await store.count(
            Table.LEMBRETES_EMAIL, {"status": "pendente", "enviado_em": None}
        )
        failed = await store.count(Table.LEMBRETES_EMAIL, {"status": "erro"})
    except Exception as e:
        print(f"[ERROR] Failed to check reminders: {e}")
        return

    print(f"[INFO] {pending} pending reminder(s).")
    if failed:
        print(f"[WARN] {failed} reminder(s) marked as 'erro'.")


async def check_redis(redis_url: str) -> bool:
    print("\n3. Testing Redis (sessions)...")
    client = redis.from_url(redis_url)
    try:
        await client.ping()
    except Exception as e:
        print(f"[ERROR] Redis unreachable: {e}")
        return False
    finally:
        await client.aclose()

    print("[OK] Redis reachable.")
    return True


async def check_health() -> bool:
    settings = get_settings()
    if not settings.supabase_url or not (settings.supabase_key or settings.supabase_service_key):
        print("❌ Error: SUPABASE_URL or SUPABASE_KEY not found in environment.")
        return False

    print(f"Connecting to Supabase at {settings.supabase_url}...")
    store = SupabaseService()

    healthy = await check_store(store)
    if healthy:
        await check_pending_reminders(store)
    healthy = await check_redis(settings.redis_url) and healthy
    return healthy


def main() -> None:
    sys.exit(0 if asyncio.run(check_health()) else 1)


if __name__ == "__main__":
    main()
