"""Read access to role assignments."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ngo_admin.core.permissions.models import UserRole


class RoleAssignmentRepository:
    """Looks up the roles assigned to a user."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_roles(self, user_id: UUID) -> list[str]:
        """Get the raw role identifiers held by a user.

        Args:
            user_id: The user's UUID

        Returns:
            Role identifiers, sorted; empty if the user holds none
        """
        stmt = select(UserRole.role).where(UserRole.user_id == user_id).order_by(UserRole.role)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
