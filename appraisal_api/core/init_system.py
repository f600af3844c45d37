import logging
from appraisal_api.core.config import settings
from appraisal_api.database import SessionLocal
from appraisal_api.services.directory import DirectoryService
from appraisal_api.services.repositories import SqlTemplateRepository, SqlUserRepository
from appraisal_api.services.templates import TemplateService

logger = logging.getLogger(__name__)

def init_system_data(session_factory=SessionLocal):
    """
    Checks if the system needs initialization.
    Seeds the standard staff template and the default directory roster
    into empty tables. Existing data is never touched.
    """
    if not settings.seed_defaults:
        logger.info("Default data seeding disabled (SEED_DEFAULTS=false)")
        return

    db = session_factory()
    try:
        seeded_template = TemplateService(SqlTemplateRepository(db)).ensure_default()
        seeded_roster = DirectoryService(SqlUserRepository(db)).ensure_roster()

        if seeded_template or seeded_roster:
            logger.info("✓ System bootstrapped with default appraisal data")
        else:
            logger.info("System initialization check: existing data found, nothing seeded")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during system initialization check: {str(e)}", exc_info=True)
    finally:
        db.close()
