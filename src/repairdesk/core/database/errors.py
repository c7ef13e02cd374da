"""Classification of driver errors.

SQLAlchemy wraps driver exceptions in ``DBAPIError`` subclasses. MySQL
drivers report a numeric error code as the first argument of the original
exception; other dialects only give us a message. Each helper checks the
code first and falls back to message markers so the same logic works for
MySQL in production and SQLite in tests.
"""

import re
from collections.abc import Iterable

from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError


# MySQL server and client error numbers
ER_DUP_FIELDNAME = 1060
ER_DUP_KEYNAME = 1061
ER_DUP_ENTRY = 1062
CR_CONNECTION_ERROR = 2002
CR_CONN_HOST_ERROR = 2003
CR_SERVER_GONE_ERROR = 2006
CR_SERVER_LOST = 2013
CR_SERVER_LOST_EXTENDED = 2055

TRANSIENT_CODES = frozenset(
    {
        CR_CONNECTION_ERROR,
        CR_CONN_HOST_ERROR,
        CR_SERVER_GONE_ERROR,
        CR_SERVER_LOST,
        CR_SERVER_LOST_EXTENDED,
    }
)

TRANSIENT_MARKERS = (
    "connection reset",
    "connection refused",
    "lost connection",
    "connection was killed",
    "server has gone away",
    "connection lost",
)


def error_code(exc: BaseException) -> int | None:
    """Return the MySQL error number carried by ``exc``, if any."""
    orig = getattr(exc, "orig", None) or exc
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None


def error_message(exc: BaseException) -> str:
    """Return the driver-level message for ``exc``."""
    orig = getattr(exc, "orig", None) or exc
    return str(orig)


def is_transient_error(exc: BaseException) -> bool:
    """Whether retrying the unit of work might succeed.

    Connection resets, refusals, lost connections and timeouts are
    transient. Access denied, unknown database, syntax and schema errors
    are not.
    """
    if isinstance(exc, (TimeoutError, ConnectionError, PoolTimeoutError)):
        return True
    if not isinstance(exc, DBAPIError):
        return False
    if exc.connection_invalidated:
        return True
    code = error_code(exc)
    if code is not None:
        return code in TRANSIENT_CODES
    message = error_message(exc).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


def is_duplicate_column(exc: BaseException) -> bool:
    if error_code(exc) == ER_DUP_FIELDNAME:
        return True
    return "duplicate column" in error_message(exc).lower()


def is_duplicate_index(exc: BaseException) -> bool:
    if error_code(exc) == ER_DUP_KEYNAME:
        return True
    message = error_message(exc).lower()
    return "index" in message and "already exists" in message


def is_duplicate_entry(exc: BaseException) -> bool:
    if error_code(exc) == ER_DUP_ENTRY:
        return True
    message = error_message(exc).lower()
    return "unique constraint failed" in message or "duplicate entry" in message


def duplicate_entry_field(exc: BaseException, columns: Iterable[str]) -> str | None:
    """Name the unique column a duplicate-entry error collided on.

    MySQL: ``Duplicate entry '123' for key 'tbl.imeiNo'``.
    SQLite: ``UNIQUE constraint failed: tbl.imeiNo``.
    """
    message = error_message(exc)
    # Drop the offending value so it cannot be mistaken for a column name
    key_part = message.split("for key", 1)[-1]
    for column in columns:
        if re.search(rf"(?<![A-Za-z0-9_]){re.escape(column)}(?![A-Za-z0-9_])", key_part):
            return column
    return None
