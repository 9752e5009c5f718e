"""Storage backends for named settings.

Each backend reads and writes one JSON value per key, together with an
integer revision. Writes are compare-and-set on the revision: a write
based on an outdated revision raises StaleRevisionError instead of
silently overwriting a concurrent change. A key that was never written
has revision 0.
"""

import copy
import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from redis.exceptions import RedisError, WatchError
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ngo_admin.core.cache import redis_client
from ngo_admin.core.errors import SettingsStoreError, StaleRevisionError
from ngo_admin.core.settings.models import SiteSetting


if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from ngo_admin.config import Settings


logger = structlog.get_logger()


@dataclass(frozen=True)
class StoredSetting:
    """A setting value as read from a backend."""

    value: Any
    revision: int


class SettingsBackend(Protocol):
    """Interface shared by all settings backends."""

    async def fetch(self, key: str) -> StoredSetting | None:
        """Return the stored value and revision, or None if unset.

        Raises:
            SettingsStoreError: If the backend cannot be reached
        """
        ...

    async def store(self, key: str, value: Any, expected_revision: int) -> int:
        """Overwrite a value if its revision still matches.

        Returns:
            The new revision

        Raises:
            StaleRevisionError: If the stored revision differs
            SettingsStoreError: If the backend cannot be reached
        """
        ...


class SqlSettingsBackend:
    """Settings stored as rows of the ``site_settings`` table."""

    def __init__(self, session_factory: "async_sessionmaker[AsyncSession]") -> None:
        self._session_factory = session_factory

    async def fetch(self, key: str) -> StoredSetting | None:
        stmt = select(SiteSetting.setting_value, SiteSetting.revision).where(
            SiteSetting.setting_key == key
        )
        try:
            async with self._session_factory() as session:
                row = (await session.execute(stmt)).one_or_none()
        # Driver connect failures surface as OSError, unwrapped by SQLAlchemy
        except (SQLAlchemyError, OSError) as exc:
            raise SettingsStoreError(
                f"Failed to read setting {key!r}",
                details={"setting_key": key},
            ) from exc

        if row is None:
            return None
        return StoredSetting(value=row.setting_value, revision=row.revision)

    async def store(self, key: str, value: Any, expected_revision: int) -> int:
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    update(SiteSetting)
                    .where(
                        SiteSetting.setting_key == key,
                        SiteSetting.revision == expected_revision,
                    )
                    .values(setting_value=value, revision=SiteSetting.revision + 1)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 1:
                    return expected_revision + 1

                current = await session.scalar(
                    select(SiteSetting.revision).where(SiteSetting.setting_key == key)
                )
                if current is not None or expected_revision != 0:
                    raise StaleRevisionError(expected_revision, current)

                session.add(SiteSetting(setting_key=key, setting_value=value, revision=1))
                await session.flush()
                return 1
        except IntegrityError as exc:
            # Another writer inserted the row first
            raise StaleRevisionError(expected_revision, None) from exc
        except (SQLAlchemyError, OSError) as exc:
            raise SettingsStoreError(
                f"Failed to write setting {key!r}",
                details={"setting_key": key},
            ) from exc


def _parse_revision(key: str, raw: Any) -> int:
    if raw is None:
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise SettingsStoreError(
            f"Setting {key!r} has a malformed revision",
            details={"setting_key": key, "revision": str(raw)},
        ) from exc


class RedisSettingsBackend:
    """Settings stored as Redis hashes with ``value`` and ``revision`` fields."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def _name(self, key: str) -> str:
        return f"{self.prefix}{key}" if self.prefix else key

    async def fetch(self, key: str) -> StoredSetting | None:
        try:
            async with redis_client() as client:
                data = await client.hgetall(self._name(key))
        except RedisError as exc:
            raise SettingsStoreError(
                f"Failed to read setting {key!r}",
                details={"setting_key": key},
            ) from exc

        if not data:
            return None
        return StoredSetting(
            value=data.get("value"),
            revision=_parse_revision(key, data.get("revision")),
        )

    async def store(self, key: str, value: Any, expected_revision: int) -> int:
        name = self._name(key)
        payload = json.dumps(value, sort_keys=True)
        new_revision = expected_revision + 1

        try:
            async with redis_client() as client, client.pipeline(transaction=True) as pipe:
                await pipe.watch(name)
                raw_revision = await pipe.hget(name, "revision")
                current = _parse_revision(key, raw_revision)
                if current != expected_revision:
                    raise StaleRevisionError(expected_revision, current)

                pipe.multi()
                pipe.hset(name, mapping={"value": payload, "revision": new_revision})
                await pipe.execute()
        except WatchError as exc:
            raise StaleRevisionError(expected_revision, None) from exc
        except RedisError as exc:
            raise SettingsStoreError(
                f"Failed to write setting {key!r}",
                details={"setting_key": key},
            ) from exc

        return new_revision


class MemorySettingsBackend:
    """Process-local settings, for development and tests.

    Nothing survives a restart.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, StoredSetting] = {
            key: StoredSetting(value=copy.deepcopy(value), revision=1)
            for key, value in (initial or {}).items()
        }

    async def fetch(self, key: str) -> StoredSetting | None:
        stored = self._values.get(key)
        if stored is None:
            return None
        return StoredSetting(value=copy.deepcopy(stored.value), revision=stored.revision)

    async def store(self, key: str, value: Any, expected_revision: int) -> int:
        stored = self._values.get(key)
        current = stored.revision if stored else 0
        if current != expected_revision:
            raise StaleRevisionError(expected_revision, current)

        self._values[key] = StoredSetting(value=copy.deepcopy(value), revision=current + 1)
        return current + 1


def build_settings_backend(settings: "Settings") -> SettingsBackend:
    """Create the backend selected by ``settings.settings_backend``."""
    if settings.settings_backend == "redis":
        backend: SettingsBackend = RedisSettingsBackend(prefix=settings.redis_settings_prefix)
    elif settings.settings_backend == "memory":
        backend = MemorySettingsBackend()
    else:
        from ngo_admin.core.database import async_session_factory  # noqa: PLC0415

        backend = SqlSettingsBackend(async_session_factory)

    logger.debug("settings_backend_selected", backend=type(backend).__name__)
    return backend
