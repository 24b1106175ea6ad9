"""Initialize database tables and create initial data if needed"""
import logging
from memberhub.db.base import Base
from memberhub.db.session import engine, SessionLocal
from memberhub import models  # noqa: F401  registers every table on Base.metadata
from memberhub.models.admin import Admin, AdminRole, AdminStatus
from memberhub.services.auth_service import get_password_hash
from memberhub.core.config import settings

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create all database tables"""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}")
        raise


def create_initial_data() -> None:
    """Create the superadmin from .env configuration when none exists"""
    db = SessionLocal()
    try:
        if db.query(Admin).filter(Admin.role == AdminRole.SUPER_ADMIN).count() == 0:
            super_admin = Admin(
                username=settings.SUPER_ADMIN_USERNAME,
                email=settings.SUPER_ADMIN_EMAIL.lower(),
                password_hash=get_password_hash(settings.SUPER_ADMIN_PASSWORD),
                first_name="Super",
                last_name="Admin",
                role=AdminRole.SUPER_ADMIN,
                status=AdminStatus.APPROVED,
                is_active=True,
            )
            db.add(super_admin)
            db.commit()
            logger.info(f"Superadmin created: {settings.SUPER_ADMIN_USERNAME}")
            logger.warning("Change default superadmin credentials in .env file!")

    except Exception as e:
        logger.error(f"Error creating initial data: {str(e)}")
        db.rollback()
    finally:
        db.close()
