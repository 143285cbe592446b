"""
Ricrea lo schema del database della sartoria (drop + create di tutte le tabelle).

Uso: python reset_db.py
"""

import asyncio
import logging
import os
import sys

# Aggiungi backend/ alla PYTHONPATH per importare app.*
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "backend"))

from app.core.config import settings
from app.core.database import engine
from app.models import Base

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("reset_db")


async def reset() -> None:
    if settings.is_production:
        raise SystemExit("Reset del database non consentito in produzione")

    logger.info("Connessione al database, eliminazione tabelle...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Tabelle eliminate: %s", ", ".join(sorted(Base.metadata.tables)))
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Database resettato con successo")


if __name__ == "__main__":
    asyncio.run(reset())
