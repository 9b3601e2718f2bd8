from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.pagination import Page, PageQuery
from ..common.validators import FieldErrors, optional_max_length, require_length
from ..core.enums import PermissionAction
from ..core.exceptions import FieldValidationError, NotFoundError, ReferentialIntegrityError, ValidationError
from .model import Permission
from .repository import PermissionRepository


def _parse_action(value: Any) -> PermissionAction:
    try:
        return PermissionAction(str(value or "").strip().upper())
    except ValueError:
        raise FieldValidationError("action", "Invalid action")


class PermissionService:
    """Use case: manage the permission catalogue."""

    def __init__(self, permissions: PermissionRepository):
        self._permissions = permissions

    def list_permissions(
        self,
        query: PageQuery,
        *,
        module: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Page[Permission]:
        action_filter = _parse_action(action) if action else None
        return self._permissions.list_page(query, module=(module or "").strip() or None, action=action_filter)

    def get_permission(self, permission_id: int) -> Permission:
        permission = self._permissions.get_by_id(int(permission_id))
        if not permission:
            raise NotFoundError("Permission not found")
        return permission

    def create_permission(self, *, name: Any, description: Any, module: Any, action: Any) -> Permission:
        errors = FieldErrors()
        name_v = errors.check(require_length, name, "name", 2, 50)
        description_v = errors.check(optional_max_length, description, "description", 200)
        module_v = errors.check(require_length, module, "module", 2, 30)
        action_v = errors.check(_parse_action, action)
        errors.raise_if_any()

        if self._permissions.get_by_name(name_v):
            raise ValidationError("A permission with this name already exists")

        permission_id = self._permissions.create(
            name=name_v,
            description=description_v,
            module=module_v,
            action=action_v,
        )
        return self.get_permission(permission_id)

    def update_permission(self, permission_id: int, changes: Mapping[str, Any]) -> Permission:
        current = self.get_permission(permission_id)

        errors = FieldErrors()
        fields: dict = {}
        if "name" in changes:
            fields["name"] = errors.check(require_length, changes["name"], "name", 2, 50)
        if "description" in changes:
            fields["description"] = errors.check(optional_max_length, changes["description"], "description", 200)
        if "module" in changes:
            fields["module"] = errors.check(require_length, changes["module"], "module", 2, 30)
        if "action" in changes:
            fields["action"] = errors.check(_parse_action, changes["action"])
        errors.raise_if_any()

        new_name = fields.get("name")
        if new_name and new_name != current.name and self._permissions.get_by_name(new_name):
            raise ValidationError("A permission with this name already exists")

        self._permissions.update(current.permission_id, **fields)
        return self.get_permission(current.permission_id)

    def delete_permission(self, permission_id: int) -> None:
        current = self.get_permission(permission_id)
        in_use = self._permissions.count_roles_using(current.permission_id, active_only=False)
        if in_use > 0:
            raise ReferentialIntegrityError(
                f"Cannot delete permission. It is assigned to {in_use} role(s).",
                blocking_count=in_use,
            )
        if not self._permissions.delete_by_id(current.permission_id):
            raise ValidationError("Failed to delete permission")

    def activate_permission(self, permission_id: int) -> Permission:
        current = self.get_permission(permission_id)
        self._permissions.set_active(current.permission_id, is_active=True)
        return self.get_permission(current.permission_id)

    def deactivate_permission(self, permission_id: int) -> Permission:
        current = self.get_permission(permission_id)
        in_use = self._permissions.count_roles_using(current.permission_id, active_only=True)
        if in_use > 0:
            raise ReferentialIntegrityError(
                f"Cannot deactivate permission. It is assigned to {in_use} active role(s).",
                blocking_count=in_use,
            )
        self._permissions.set_active(current.permission_id, is_active=False)
        return self.get_permission(current.permission_id)

    def list_modules(self) -> Sequence[str]:
        return self._permissions.list_modules()

    @staticmethod
    def list_actions() -> list[str]:
        return [a.value for a in PermissionAction]
