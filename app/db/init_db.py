# app/db/init_db.py
import logging

from app.db.base import Base, engine

logger = logging.getLogger(__name__)


def import_models():
    # every mapped class must be registered before relationships resolve
    from app.db.models import appointment, availability, loyalty, review, technician, user  # noqa: F401


def init_db(bind=None):
    import_models()
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")
