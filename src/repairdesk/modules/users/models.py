"""Account database model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from repairdesk.core.constants import MAX_EMAIL_LENGTH, MAX_ID_LENGTH, MAX_NAME_LENGTH
from repairdesk.core.database.base import Base, StringIdMixin, TimestampMixin


class User(Base, StringIdMixin, TimestampMixin):
    """A registered shop account.

    Attributes:
        tenant_id: Opaque id naming the account's tables; assigned once at
            signup and never changed
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(MAX_EMAIL_LENGTH), nullable=False, unique=True)
    shop_name: Mapped[str | None] = mapped_column("shopName", String(MAX_NAME_LENGTH))
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="user")
    tenant_id: Mapped[str | None] = mapped_column(
        "tenantId",
        String(MAX_ID_LENGTH),
        unique=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
