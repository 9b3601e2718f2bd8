from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.pagination import Page, PageQuery
from ..common.validators import FieldErrors, optional_max_length, require_length
from ..core.exceptions import FieldValidationError, NotFoundError, ReferentialIntegrityError, ValidationError
from ..permissions.repository import PermissionRepository
from ..users.repository import UserRepository
from .model import Role
from .repository import RoleRepository


def _require_permission_ids(value: Any) -> list[int]:
    if not isinstance(value, (list, tuple)) or not value:
        raise FieldValidationError("permission_ids", "Select at least one permission")
    try:
        return sorted({int(v) for v in value})
    except (TypeError, ValueError):
        raise FieldValidationError("permission_ids", "Invalid permission id")


class RoleService:
    """Use case: manage roles and their permission sets."""

    def __init__(self, roles: RoleRepository, permissions: PermissionRepository, users: UserRepository):
        self._roles = roles
        self._permissions = permissions
        self._users = users

    def describe(self, role: Role) -> dict:
        """Role with its permission ids expanded into permission summaries."""
        permissions = self._permissions.get_many(role.permission_ids)
        return {
            "role_id": role.role_id,
            "name": role.name,
            "description": role.description,
            "is_active": role.is_active,
            "permission_ids": list(role.permission_ids),
            "permissions": [
                {
                    "permission_id": p.permission_id,
                    "name": p.name,
                    "module": p.module,
                    "action": p.action,
                    "is_active": p.is_active,
                }
                for p in sorted(permissions, key=lambda p: (p.module, p.name))
            ],
            "created_at": role.created_at,
            "updated_at": role.updated_at,
        }

    def list_roles(self, query: PageQuery, *, is_active: Optional[bool] = None) -> Page[dict]:
        page = self._roles.list_page(query, is_active=is_active)
        return Page(items=[self.describe(r) for r in page.items], total=page.total, query=page.query)

    def get_role(self, role_id: int) -> Role:
        role = self._roles.get_by_id(int(role_id))
        if not role:
            raise NotFoundError("Role not found")
        return role

    def _check_permissions_exist(self, permission_ids: Sequence[int]) -> None:
        found = {p.permission_id for p in self._permissions.get_many(permission_ids)}
        if found != set(permission_ids):
            raise ValidationError("One or more permissions do not exist")

    def create_role(self, *, name: Any, description: Any, permission_ids: Any) -> Role:
        errors = FieldErrors()
        name_v = errors.check(require_length, name, "name", 2, 50)
        description_v = errors.check(optional_max_length, description, "description", 200)
        ids = errors.check(_require_permission_ids, permission_ids)
        errors.raise_if_any()

        if self._roles.get_by_name(name_v):
            raise ValidationError("A role with this name already exists")
        self._check_permissions_exist(ids)

        role_id = self._roles.create(name=name_v, description=description_v, permission_ids=ids)
        return self.get_role(role_id)

    def update_role(self, role_id: int, changes: Mapping[str, Any]) -> Role:
        current = self.get_role(role_id)

        errors = FieldErrors()
        fields: dict = {}
        if "name" in changes:
            fields["name"] = errors.check(require_length, changes["name"], "name", 2, 50)
        if "description" in changes:
            fields["description"] = errors.check(optional_max_length, changes["description"], "description", 200)
        ids = None
        if "permission_ids" in changes:
            ids = errors.check(_require_permission_ids, changes["permission_ids"])
        errors.raise_if_any()

        new_name = fields.get("name")
        if new_name and new_name != current.name and self._roles.get_by_name(new_name):
            raise ValidationError("A role with this name already exists")
        if ids is not None:
            self._check_permissions_exist(ids)

        self._roles.update(current.role_id, **fields)
        if ids is not None:
            self._roles.set_permissions(current.role_id, ids)
        return self.get_role(current.role_id)

    def _ensure_unused(self, role: Role, verb: str) -> None:
        in_use = self._users.count_active_by_role(role.role_id)
        if in_use > 0:
            raise ReferentialIntegrityError(
                f"Cannot {verb} role. {in_use} active user(s) are assigned to this role.",
                blocking_count=in_use,
            )

    def delete_role(self, role_id: int) -> None:
        current = self.get_role(role_id)
        self._ensure_unused(current, "delete")
        if not self._roles.delete_by_id(current.role_id):
            raise ValidationError("Failed to delete role")

    def activate_role(self, role_id: int) -> Role:
        current = self.get_role(role_id)
        self._roles.set_active(current.role_id, is_active=True)
        return self.get_role(current.role_id)

    def deactivate_role(self, role_id: int) -> Role:
        current = self.get_role(role_id)
        self._ensure_unused(current, "deactivate")
        self._roles.set_active(current.role_id, is_active=False)
        return self.get_role(current.role_id)
