#!/usr/bin/env python3
"""Report which WASTE_ settings are in effect and write a template .env when none exists."""

import sys
from pathlib import Path

TEMPLATE = """# Store backend: memory (default) or supabase
WASTE_STORE_BACKEND=memory

# Supabase Configuration (required when WASTE_STORE_BACKEND=supabase)
# Tables are created by sql/schema.sql
WASTE_SUPABASE_URL=https://your-project-id.supabase.co
WASTE_SUPABASE_KEY=your-service-role-key-here

# Capacity planning
WASTE_TRUCK_CAPACITY=1000
WASTE_STAFF_PER_TRUCK=2

# Checkout provider (optional; session confirmation is disabled without a key)
# WASTE_CHECKOUT_SECRET_KEY=sk_test_...

# Comma-separated or JSON array: http://localhost:5173,http://127.0.0.1:5173
# WASTE_FRONTEND_ALLOWED_ORIGINS=
"""


def _mask(value: str | None, keep: int = 12) -> str:
    if not value:
        return "NOT SET"
    return value if len(value) <= keep else f"{value[:keep]}..."


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    if not env_file.exists():
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created template .env at {env_file}; edit it and run this script again.")
        return 1

    sys.path.insert(0, str(project_root / "src"))
    try:
        from wastecore.config import settings
    except Exception as exc:
        print(f"Error loading config: {exc}")
        return 1

    print(f"store_backend        = {settings.store_backend}")
    print(f"truck_capacity       = {settings.truck_capacity}")
    print(f"staff_per_truck      = {settings.staff_per_truck}")
    print(f"supabase_url         = {_mask(settings.supabase_url, keep=30)}")
    print(f"supabase_key         = {_mask(settings.supabase_key)}")
    print(f"checkout_secret_key  = {_mask(settings.checkout_secret_key, keep=8)}")

    if settings.store_backend == "supabase" and not (settings.supabase_url and settings.supabase_key):
        print("ERROR: supabase store selected but WASTE_SUPABASE_URL / WASTE_SUPABASE_KEY are missing.")
        return 1
    print("Configuration OK.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
