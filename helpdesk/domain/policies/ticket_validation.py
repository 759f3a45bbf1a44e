"""TicketValidationPolicy — pure checks on ticket drafts and partial updates."""

from __future__ import annotations

from enum import Enum
from typing import Any

from helpdesk.domain.value_objects.enums import (
    Category,
    Department,
    EquipmentType,
    Priority,
    TicketStatus,
)

REQUIRED_FIELDS: tuple[str, ...] = ("title", "description", "category", "department")

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "department": Department,
    "category": Category,
    "priority": Priority,
    "status": TicketStatus,
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _enum_violation(field: str, value: Any) -> str | None:
    enum_cls = _ENUM_FIELDS[field]
    try:
        enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        return f"Invalid {field} '{value}'. Allowed: {allowed}"
    return None


def _equipment_violations(equipment: Any) -> list[str]:
    if not isinstance(equipment, dict):
        return ["Equipment details are required for category 'Equipment Issue'"]

    violations = []
    if _is_blank(equipment.get("name")):
        violations.append("Equipment name is required for category 'Equipment Issue'")
    eq_type = equipment.get("type")
    if _is_blank(eq_type):
        violations.append("Equipment type is required for category 'Equipment Issue'")
    else:
        try:
            EquipmentType(eq_type)
        except ValueError:
            violations.append(f"Invalid equipment type '{eq_type}'")
    return violations


def validate_ticket_draft(draft: dict[str, Any]) -> list[str]:
    """Return every violation found in a new-ticket draft (empty list = valid).

    Rules:
      1. title, description, category and department must be present and non-blank.
      2. department / category / priority must be known values.
      3. category == "Equipment Issue" requires equipment.name and equipment.type.
    """
    violations = [
        f"Missing required field: {name}"
        for name in REQUIRED_FIELDS
        if _is_blank(draft.get(name))
    ]

    for name in ("department", "category", "priority"):
        value = draft.get(name)
        if _is_blank(value):
            continue
        problem = _enum_violation(name, value)
        if problem:
            violations.append(problem)

    if draft.get("category") == Category.EQUIPMENT_ISSUE.value:
        violations.extend(_equipment_violations(draft.get("equipment")))

    return violations


def validate_ticket_changes(
    changes: dict[str, Any],
    current_category: str | None = None,
    current_equipment: dict[str, Any] | None = None,
) -> list[str]:
    """Validate a partial update against the ticket it will be applied to.

    Only the supplied fields are checked, except that moving a ticket into
    "Equipment Issue" still requires equipment details to end up present.
    """
    violations = []

    for name in ("title", "description"):
        if name in changes and _is_blank(changes[name]):
            violations.append(f"Field '{name}' cannot be blank")

    if "is_pinned" in changes and not isinstance(changes["is_pinned"], bool):
        violations.append("Field 'is_pinned' must be true or false")

    for name in _ENUM_FIELDS:
        if name in changes:
            if _is_blank(changes[name]):
                violations.append(f"Field '{name}' cannot be blank")
                continue
            problem = _enum_violation(name, changes[name])
            if problem:
                violations.append(problem)

    category = changes.get("category", current_category)
    touched = "category" in changes or "equipment" in changes
    if category == Category.EQUIPMENT_ISSUE.value and touched:
        equipment = changes.get("equipment", current_equipment)
        violations.extend(_equipment_violations(equipment))

    return violations
