"""
Authentication and Authorization System
"""

from .role_system import (
    role_system,
    RoleSystem,
    manager_role,
    is_super_admin,
    is_partner,
    can_manage_category,
)
from .middleware import (
    auth_middleware,
    get_current_user,
    require_auth,
    require_super_admin,
    require_partner,
)

__all__ = [
    "role_system",
    "RoleSystem",
    "manager_role",
    "is_super_admin",
    "is_partner",
    "can_manage_category",
    "auth_middleware",
    "get_current_user",
    "require_auth",
    "require_super_admin",
    "require_partner",
]
