"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# MySQL caps table, column and index names at 64 characters
MAX_IDENTIFIER_LENGTH = 64

# Tenant table naming
TENANT_TABLE_PREFIX = "tenant_"

# String field lengths
MAX_ID_LENGTH = 36
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_BRAND_LENGTH = 100
MAX_NUMBER_LENGTH = 50
MAX_ROLE_LENGTH = 50
IMEI_LENGTH = 15

# Ticket numbering
DEFAULT_WARRANTY = "Without Warranty"
DEFAULT_MEMBER_ROLE = "member"
REPAIR_NUMBER_DIGITS = 4
SPU_DIGITS = 3
SERIAL_NUMBER_DIGITS = 4

# Pagination defaults
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
