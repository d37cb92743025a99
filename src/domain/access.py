"""Role and ownership rules for authenticated callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .enums import Role
from .errors import PermissionDenied


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, decoded from a bearer token."""

    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def ensure_role(principal: Principal, allowed: Iterable[Role]) -> None:
    if principal.role not in set(allowed):
        raise PermissionDenied("Access denied. Insufficient permissions.")


def can_act_for(principal: Principal, owner_role: Role, owner_id: Optional[int]) -> bool:
    """Whether *principal* may act on a resource owned by ``(owner_role, owner_id)``."""
    role = Role(principal.role)
    if role == Role.ADMIN:
        return True
    if role == Role.CUSTOMER or role == Role.DRIVER:
        return owner_role == role and owner_id == principal.id
    raise ValueError(f"Unhandled role: {role!r}")


def ensure_owner_or_admin(
    principal: Principal,
    owner_role: Role,
    owner_id: Optional[int],
    message: str = "Access denied. You can only act on your own resources.",
) -> None:
    if not can_act_for(principal, owner_role, owner_id):
        raise PermissionDenied(message)
