"""
Roles and the pure authorization rules built on them.

Who may do what is a function of the caller's role on a wishlist only:

  - owner      implicit, via Wishlist.owner_id
  - view_edit  explicit grant, may mutate items (policy permitting)
  - view_only  explicit grant, read access
  - none       no grant, no access
"""

import enum


class Role(str, enum.Enum):
    OWNER = "owner"
    VIEW_EDIT = "view_edit"
    VIEW_ONLY = "view_only"
    NONE = "none"


# Roles that may be stored on an AccessGrant / Invitation row.
GRANTABLE_ROLES = frozenset({Role.VIEW_ONLY, Role.VIEW_EDIT})


class EditPolicy(str, enum.Enum):
    OWNER_OR_EDITOR = "owner_or_editor"
    OWNER_ONLY = "owner_only"


class AcceptPolicy(str, enum.Enum):
    UPDATE = "update"
    REJECT = "reject"


def resolve_role(owner_id: int, user_id: int, grant_role: Role | None) -> Role:
    """Owner wins; otherwise the stored grant; otherwise no access."""
    if owner_id == user_id:
        return Role.OWNER
    if grant_role is None:
        return Role.NONE
    return grant_role


def can_view(role: Role) -> bool:
    if role is Role.OWNER or role is Role.VIEW_EDIT or role is Role.VIEW_ONLY:
        return True
    if role is Role.NONE:
        return False
    raise ValueError(f"unknown role: {role!r}")


def can_edit(role: Role, policy: EditPolicy) -> bool:
    if role is Role.OWNER:
        return True
    if role is Role.VIEW_EDIT:
        return policy is EditPolicy.OWNER_OR_EDITOR
    if role is Role.VIEW_ONLY or role is Role.NONE:
        return False
    raise ValueError(f"unknown role: {role!r}")


def ensure_grantable(role: Role) -> Role:
    """Raise ValueError for roles that cannot be persisted on a grant."""
    if role not in GRANTABLE_ROLES:
        raise ValueError("role must be one of: view_only, view_edit")
    return role
