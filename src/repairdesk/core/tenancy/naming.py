"""Tenant table naming.

Every tenant owns four tables whose names are a pure function of the
tenant id. Characters outside ``[A-Za-z0-9_]`` are replaced with ``_``
so the result is always a legal identifier; the names are still escaped
by :mod:`repairdesk.core.tenancy.guard` before they reach SQL text.
"""

import re
from dataclasses import dataclass

from repairdesk.core.constants import MAX_IDENTIFIER_LENGTH, TENANT_TABLE_PREFIX
from repairdesk.core.errors import ValidationError


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_]")

REPAIR_TICKETS_SUFFIX = "_repair_tickets"
TEAM_MEMBERS_SUFFIX = "_team_members"
DELETED_TICKETS_SUFFIX = "_deleted_tickets"
DELETED_MEMBERS_SUFFIX = "_deleted_members"

_LONGEST_SUFFIX = max(
    len(REPAIR_TICKETS_SUFFIX),
    len(TEAM_MEMBERS_SUFFIX),
    len(DELETED_TICKETS_SUFFIX),
    len(DELETED_MEMBERS_SUFFIX),
)

# Longest tenant id whose derived names still fit MySQL's identifier limit
MAX_TENANT_ID_LENGTH = MAX_IDENTIFIER_LENGTH - len(TENANT_TABLE_PREFIX) - _LONGEST_SUFFIX


@dataclass(frozen=True, slots=True)
class TenantTableSet:
    """The four table names owned by one tenant."""

    repair_tickets: str
    team_members: str
    deleted_tickets: str
    deleted_members: str

    def all(self) -> tuple[str, str, str, str]:
        return (
            self.repair_tickets,
            self.team_members,
            self.deleted_tickets,
            self.deleted_members,
        )


def validate_tenant_id(tenant_id: object) -> str:
    """Reject tenant ids that cannot be turned into table names.

    Raises:
        ValidationError: If the id is not a non-empty printable string of
            at most ``MAX_TENANT_ID_LENGTH`` characters
    """
    if not isinstance(tenant_id, str) or not tenant_id.strip():
        raise ValidationError(
            "Tenant id is required",
            errors=[{"field": "tenantId", "message": "must be a non-empty string"}],
        )
    if not tenant_id.isprintable():
        raise ValidationError(
            "Tenant id contains non-printable characters",
            errors=[{"field": "tenantId", "message": "must be printable"}],
        )
    if len(tenant_id) > MAX_TENANT_ID_LENGTH:
        raise ValidationError(
            "Tenant id is too long",
            errors=[
                {
                    "field": "tenantId",
                    "message": f"must be at most {MAX_TENANT_ID_LENGTH} characters",
                }
            ],
        )
    return tenant_id


def normalize_tenant_id(tenant_id: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with ``_``.

    Two ids that differ only in such characters normalize to the same
    string and would share tables; see DESIGN.md.
    """
    return _UNSAFE_CHARS.sub("_", tenant_id)


def derive_table_names(tenant_id: str) -> TenantTableSet:
    """Derive the table names for ``tenant_id``.

    Example:
        >>> derive_table_names("a1b2-c3d4").repair_tickets
        'tenant_a1b2_c3d4_repair_tickets'
    """
    prefix = TENANT_TABLE_PREFIX + normalize_tenant_id(validate_tenant_id(tenant_id))
    return TenantTableSet(
        repair_tickets=prefix + REPAIR_TICKETS_SUFFIX,
        team_members=prefix + TEAM_MEMBERS_SUFFIX,
        deleted_tickets=prefix + DELETED_TICKETS_SUFFIX,
        deleted_members=prefix + DELETED_MEMBERS_SUFFIX,
    )
