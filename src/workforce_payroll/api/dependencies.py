"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_payroll.api.authorization import Capability, Role, has_capability
from workforce_payroll.database import init_db


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, session_factory = init_db()
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as forwarded by the gateway."""

    user_id: str
    role: Role


async def get_actor(
    x_user_id: Annotated[str | None, Header()] = None,
    x_user_role: Annotated[str | None, Header()] = None,
) -> Actor:
    """Extract the caller identity from headers."""
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token is required",
        )
    try:
        role = Role(x_user_role.upper())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this resource",
        )
    return Actor(user_id=x_user_id, role=role)


def require(capability: Capability) -> Callable:
    """Build a dependency that rejects actors lacking ``capability``."""

    async def check(actor: Annotated[Actor, Depends(get_actor)]) -> Actor:
        if not has_capability(actor.role, capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to access this resource",
            )
        return actor

    return check


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Viewer = Annotated[Actor, Depends(require(Capability.VIEW_PAYROLL))]
Manager = Annotated[Actor, Depends(require(Capability.MANAGE_PAYROLL))]
Admin = Annotated[Actor, Depends(require(Capability.DELETE_PAY_PERIOD))]
