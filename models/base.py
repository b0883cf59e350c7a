"""
Base schemas shared by all models.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class SnapshotSchema(BaseSchema):
    """
    Immutable snapshot.

    Used for values the core reads but never mutates (positions, zones,
    inventory items, computed results). Frozen models are hashable and
    compare by value.
    """
    model_config = ConfigDict(frozen=True)
