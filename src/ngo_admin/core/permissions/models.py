"""Role assignment table.

Rows are owned by the user-management feature; the permission engine only
reads them to find out which roles a user holds.
"""

from uuid import UUID

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ngo_admin.core.constants import MAX_ROLE_NAME_LENGTH
from ngo_admin.core.database.base import Base, TimestampMixin


class UserRole(Base, TimestampMixin):
    """One role held by one user.

    ``role`` is stored as plain text; values that are not known roles are
    ignored when permissions are checked.
    """

    __tablename__ = "user_roles"

    user_id: Mapped[UUID] = mapped_column(primary_key=True, index=True)
    role: Mapped[str] = mapped_column(String(MAX_ROLE_NAME_LENGTH), primary_key=True)

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role={self.role})>"
