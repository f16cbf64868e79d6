#!/usr/bin/env python3
"""Create the conversation state table.

The server also does this on startup when STORAGE_BACKEND=sql; run this
to prepare a database ahead of time.

Usage:
    DATABASE_URL=sqlite+aiosqlite:///./data/contoso_cafe.db python scripts/init_db.py
"""

import asyncio

from contoso_cafe.config import get_settings
from contoso_cafe.db.session import close_db, init_db


async def main() -> None:
    await init_db()
    await close_db()
    print(f"Conversation state table ready at {get_settings().database_url}")


if __name__ == "__main__":
    asyncio.run(main())
