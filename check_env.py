#!/usr/bin/env python3
"""Helper script to check and create the .env file for the delivery store."""

import os
import sys
from pathlib import Path

ENV_TEMPLATE = """# Supabase configuration (required for the delivery table)
DOCK_SUPABASE_URL=https://your-project-id.supabase.co
DOCK_SUPABASE_KEY=your-key-here

# Tables
DOCK_DELIVERIES_TABLE=deliveries
DOCK_LAST_UPDATE_TABLE=ultima_atualizacao

# Days at dock before a delivery is highlighted
DOCK_OVERDUE_THRESHOLD_DAYS=5

# API
DOCK_API_PREFIX=/api
# DOCK_FRONTEND_ALLOWED_ORIGINS=["http://localhost:5173","http://127.0.0.1:5173"]
"""


def _mask(value: str) -> str:
    if len(value) > 20:
        return value[:20] + "..." + value[-10:]
    return value


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Dock Tracker environment checker")
    print("=" * 60)

    if not env_file.exists():
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Edit it and add your Supabase credentials.")
        return 1

    print(f"Found .env file at: {env_file}")
    for line in env_file.read_text(encoding="utf-8").splitlines():
        if line.startswith("DOCK_SUPABASE_KEY") and "=" in line:
            name, value = line.split("=", 1)
            print(f"  {name}={_mask(value.strip())}")
        else:
            print(f"  {line}")
    print()

    for name in ("DOCK_SUPABASE_URL", "DOCK_SUPABASE_KEY"):
        state = "set" if os.getenv(name) else "not set"
        print(f"{name} in process environment: {state}")

    sys.path.insert(0, str(project_root / "src"))
    from dock_tracker.config import settings

    if settings.supabase_url and settings.supabase_key:
        print("SUCCESS: Supabase is configured.")
        return 0
    print("ERROR: Supabase is NOT configured. Variables must start with the DOCK_ prefix.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
