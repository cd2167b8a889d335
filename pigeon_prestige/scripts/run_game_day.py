"""
Avanza el juego un día y lanza los lotes de alimentación.
Pensado para ejecutarse desde cron una vez al día:

    0 0 * * * cd /srv/pigeon-prestige && python -m pigeon_prestige.scripts.run_game_day
"""
import structlog

from pigeon_prestige.core.logging_config import configure_logging
from pigeon_prestige.db.session import SessionLocal, engine, Base
from pigeon_prestige.db.models import _all
from pigeon_prestige.services.errors import GameRuleError
from pigeon_prestige.services.game_time import advance_game_day

logger = structlog.get_logger()


def main():
    configure_logging()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        report = advance_game_day(db, update_type="scheduled")
    except GameRuleError as e:
        logger.warning("Día de juego no avanzado", reason=str(e))
        return 1
    finally:
        db.close()

    failed = report["individual_feeding"]["failed"] + report["group_feeding"]["failed"]
    if failed:
        logger.error("Palomas sin procesar", pigeon_ids=failed)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
