"""SQLAlchemy Base class for all models."""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Root SQLAlchemy base class."""
    pass


def import_models():
    """Import all models to register them with SQLAlchemy."""
    from gatehouse.models import booking, package, user, visitor  # noqa: F401
