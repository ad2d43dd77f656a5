# app.py
# Headless court rotation host: restores the roster, fills courts and keeps
# the waiting-time ticker running until interrupted.

from __future__ import annotations

import asyncio
from typing import Optional

from court_rotation import db
from court_rotation.config import Settings, load_settings
from court_rotation.logging_config import setup_logging, get_logger
from court_rotation.rotation import RotationController

log = get_logger("court_rotation.app")


def configure(env_file: Optional[str] = None) -> Settings:
    """Read settings (including .env) first, then set up logging from them."""
    settings = load_settings(env_file)
    setup_logging(settings.log_level)
    return settings


async def main(settings: Settings) -> None:
    await db.init_db(settings.database_path)

    controller = RotationController.from_settings(settings, repository=db)
    count = await controller.load_roster()
    if count == 0:
        log.warning("No players stored in %s; ingest a roster first", settings.database_path)

    filled = await controller.allocate_courts()
    snap = controller.get_snapshot()
    for index, court in enumerate(snap.courts):
        if court is None:
            log.info("Court %s: empty", index + 1)
            continue
        t1 = ", ".join(p.name for p in court.team1.players)
        t2 = ", ".join(p.name for p in court.team2.players)
        log.info("Court %s: %s vs %s", index + 1, t1, t2)
    log.info("%s courts filled, %s waiting, %s resting", len(filled), len(snap.waiting), len(snap.resting))

    controller.start_ticker()
    try:
        await asyncio.Event().wait()
    finally:
        await controller.stop()


# --- Entrypoint ---
if __name__ == "__main__":
    settings = configure()
    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        log.info("Interrupted")
