# SQLAlchemy models
from .base import Base
from .progress import SkillProgressRow, SubjectProgressRow
from .storage import KeyValueEntry

__all__ = [
    # Base
    "Base",
    # Progress
    "SubjectProgressRow",
    "SkillProgressRow",
    # Storage
    "KeyValueEntry",
]
