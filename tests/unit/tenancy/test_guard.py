"""Unit tests for identifier quoting."""

import pytest
from sqlalchemy.dialects import mysql, postgresql, sqlite

from repairdesk.core.errors import ValidationError
from repairdesk.core.tenancy.guard import check_identifier, quote_identifier


pytestmark = pytest.mark.unit


class TestQuoteIdentifier:
    """Tests for quote_identifier."""

    def test_mysql_uses_backticks(self):
        quoted = quote_identifier("tenant_a1b2_repair_tickets", mysql.dialect())

        assert quoted == "`tenant_a1b2_repair_tickets`"

    def test_mysql_doubles_embedded_backticks(self):
        assert quote_identifier("we`ird", mysql.dialect()) == "`we``ird`"

    def test_sqlite_uses_double_quotes(self):
        assert quote_identifier("imeiNo", sqlite.dialect()) == '"imeiNo"'

    def test_postgresql_doubles_embedded_quotes(self):
        assert quote_identifier('we"ird', postgresql.dialect()) == '"we""ird"'

    def test_always_quotes_plain_names(self):
        """Even names that need no quoting are quoted."""
        assert quote_identifier("status", mysql.dialect()) == "`status`"


class TestCheckIdentifier:
    """Tests for check_identifier."""

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            check_identifier("")

    def test_rejects_overlong(self):
        with pytest.raises(ValidationError):
            check_identifier("t" * 65)

    def test_rejects_nul(self):
        with pytest.raises(ValidationError):
            check_identifier("bad\x00name")

    def test_accepts_64_characters(self):
        assert check_identifier("t" * 64) == "t" * 64
