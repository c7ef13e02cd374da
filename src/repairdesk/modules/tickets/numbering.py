"""Human-facing ticket numbers.

- Repair number: ``YYYY-NNNN``, restarting every year. Tickets created
  before the format change carry ``REP-YYYY-NNNN`` and still count.
- SPU: ``SPU-<service>-NNN`` per service prefix.
- Serial number: ``SN-YYYYMM-NNNN`` per month, only when none is given.
"""

import re
from datetime import datetime

from repairdesk.core.constants import REPAIR_NUMBER_DIGITS, SERIAL_NUMBER_DIGITS, SPU_DIGITS


LEGACY_REPAIR_PREFIX = "REP-"
DEFAULT_SERVICE = "Other"
DEFAULT_SERVICE_PREFIX = "SRV"

SERVICE_PREFIXES: dict[str, str] = {
    "LCD Repair": "SCR",
    "Screen Replacement": "SCR",
    "Battery Change": "BAT",
    "Charging IC Repair": "CHG",
    "Software Update": "SWU",
    "Data Recovery": "DAT",
    "Water Damage": "WAT",
    "Other": "OTH",
}

_TRAILING_DIGITS = re.compile(r"(\d+)$")


def sequence_of(value: str | None) -> int:
    """Trailing sequence number of a generated value, 0 if there is none."""
    if not value:
        return 0
    match = _TRAILING_DIGITS.search(value)
    return int(match.group(1)) if match else 0


def repair_number_prefixes(now: datetime) -> tuple[str, str]:
    """Current and legacy repair number prefixes for ``now``'s year."""
    current = f"{now.year}-"
    return current, LEGACY_REPAIR_PREFIX + current


def format_repair_number(now: datetime, sequence: int) -> str:
    return f"{now.year}-{sequence:0{REPAIR_NUMBER_DIGITS}d}"


def service_prefix(selected_services: list[str]) -> str:
    """Prefix for the first selected service (``OTH`` when none is selected)."""
    service = selected_services[0] if selected_services else DEFAULT_SERVICE
    return SERVICE_PREFIXES.get(service, DEFAULT_SERVICE_PREFIX)


def spu_prefix(selected_services: list[str]) -> str:
    return f"SPU-{service_prefix(selected_services)}-"


def format_spu(prefix: str, sequence: int) -> str:
    return f"{prefix}{sequence:0{SPU_DIGITS}d}"


def serial_number_prefix(now: datetime) -> str:
    return f"SN-{now.year}{now.month:02d}-"


def format_serial_number(prefix: str, sequence: int) -> str:
    return f"{prefix}{sequence:0{SERIAL_NUMBER_DIGITS}d}"
