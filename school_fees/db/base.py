"""SQLAlchemy Base class for all models."""
from school_fees.models.base.base_model import Base


def import_models():
    """Import all models to register them with SQLAlchemy."""
    import school_fees.models  # noqa: F401

    return Base.metadata


__all__ = ["Base", "import_models"]
