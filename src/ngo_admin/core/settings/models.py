"""Key-value site settings table."""

from typing import Any

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ngo_admin.core.constants import MAX_SETTING_KEY_LENGTH
from ngo_admin.core.database.base import Base, TimestampMixin, UUIDMixin


class SiteSetting(Base, UUIDMixin, TimestampMixin):
    """One named setting with a JSON value.

    Attributes:
        setting_key: Unique setting name (e.g. "permission_overrides")
        setting_value: JSON value of the setting
        revision: Incremented on every write; used to reject stale saves
    """

    __tablename__ = "site_settings"

    setting_key: Mapped[str] = mapped_column(
        String(MAX_SETTING_KEY_LENGTH),
        nullable=False,
        unique=True,
    )
    setting_value: Mapped[Any | None] = mapped_column(
        JSON,
        nullable=True,
    )
    revision: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    def __repr__(self) -> str:
        return f"<SiteSetting(key={self.setting_key}, revision={self.revision})>"
