"""Create the submission tables without starting the API."""

import asyncio

from src.config import settings
from src.database import create_engine, init_db


async def main():
    engine = create_engine(settings)
    try:
        await init_db(engine)
    finally:
        await engine.dispose()
    print("Tables ready.")


if __name__ == "__main__":
    asyncio.run(main())
