"""Shared Pydantic base schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys.

    Tenant tables store camelCase column names, so rows validate directly
    and responses serialize with the same keys.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


def reject_null(value: Any) -> Any:
    """Refuse an explicit ``null`` for a field that may only be omitted.

    Partial updates make every field optional, but fields backed by
    NOT NULL columns can be left out, never cleared.

    Raises:
        ValueError: If ``value`` is None
    """
    if value is None:
        raise ValueError("Field cannot be null")
    return value
