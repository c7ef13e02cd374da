"""Identifier escaping for dynamically built SQL.

Table names cannot be bound as query parameters, so any name that is
interpolated into SQL text goes through :func:`quote_identifier` first.
Values are never interpolated; they are always bound parameters.
"""

from sqlalchemy.engine import Dialect

from repairdesk.core.constants import MAX_IDENTIFIER_LENGTH
from repairdesk.core.errors import ValidationError


def check_identifier(name: str) -> str:
    """Validate an identifier before it is used in SQL.

    Raises:
        ValidationError: If the name is empty, too long, or contains NUL
    """
    if not name or len(name) > MAX_IDENTIFIER_LENGTH or "\x00" in name:
        raise ValidationError(
            "Invalid SQL identifier",
            details={"identifier": name[:MAX_IDENTIFIER_LENGTH]},
        )
    return name


def quote_identifier(name: str, dialect: Dialect) -> str:
    """Quote ``name`` with the dialect's identifier quoting rules.

    Quoting is unconditional: MySQL gets backticks with embedded
    backticks doubled, SQLite and PostgreSQL get double quotes with
    embedded double quotes doubled.

    Example:
        >>> from sqlalchemy.dialects import mysql
        >>> quote_identifier("evil`; DROP TABLE users; --", mysql.dialect())
        '`evil``; DROP TABLE users; --`'
    """
    return dialect.identifier_preparer.quote_identifier(check_identifier(name))
