from typing import Iterable
from pydantic import BaseModel


def reject_nulls(model: BaseModel, nullable: Iterable[str] = ()) -> None:
    """Fail when a partial update sends ``null`` for a NOT NULL column."""
    nulls = sorted(
        name for name in model.model_fields_set
        if name not in nullable and getattr(model, name) is None
    )
    if nulls:
        raise ValueError(f"{', '.join(nulls)} cannot be null")
