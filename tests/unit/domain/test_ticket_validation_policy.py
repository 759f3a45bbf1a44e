"""Tests for TicketValidationPolicy."""

from helpdesk.domain.policies.ticket_validation import (
    validate_ticket_changes,
    validate_ticket_draft,
)


def _draft(**overrides):
    draft = {
        "title": "Lab centrifuge vibrating",
        "description": "Loud vibration at 3000 rpm",
        "department": "Laboratory",
        "category": "Maintenance Request",
    }
    draft.update(overrides)
    return draft


def test_valid_draft_has_no_violations():
    assert validate_ticket_draft(_draft()) == []


def test_every_missing_field_is_reported():
    violations = validate_ticket_draft({})
    assert violations == [
        "Missing required field: title",
        "Missing required field: description",
        "Missing required field: category",
        "Missing required field: department",
    ]


def test_blank_strings_count_as_missing():
    assert validate_ticket_draft(_draft(title="  ")) == ["Missing required field: title"]


def test_unknown_enum_values():
    violations = validate_ticket_draft(_draft(department="Dermatology", priority="urgent"))
    assert len(violations) == 2
    assert violations[0].startswith("Invalid department 'Dermatology'")
    assert violations[1].startswith("Invalid priority 'urgent'")


def test_equipment_issue_requires_equipment():
    violations = validate_ticket_draft(_draft(category="Equipment Issue"))
    assert violations == ["Equipment details are required for category 'Equipment Issue'"]


def test_equipment_issue_checks_name_and_type():
    violations = validate_ticket_draft(
        _draft(category="Equipment Issue", equipment={"name": "", "type": "Toaster"})
    )
    assert violations == [
        "Equipment name is required for category 'Equipment Issue'",
        "Invalid equipment type 'Toaster'",
    ]


def test_equipment_issue_with_details_is_valid():
    draft = _draft(category="Equipment Issue", equipment={"name": "CT-2", "type": "CT Scanner"})
    assert validate_ticket_draft(draft) == []


def test_changes_only_check_supplied_fields():
    assert validate_ticket_changes({"priority": "low"}) == []
    assert validate_ticket_changes({"status": "archived"})[0].startswith("Invalid status")
    assert validate_ticket_changes({"title": ""}) == ["Field 'title' cannot be blank"]


def test_changes_keep_existing_equipment_when_untouched():
    # Changing priority on an equipment ticket doesn't re-check equipment
    assert validate_ticket_changes({"priority": "high"}, "Equipment Issue", None) == []


def test_moving_into_equipment_issue_uses_current_equipment():
    current = {"name": "X-Ray 1", "type": "X-Ray"}
    assert validate_ticket_changes({"category": "Equipment Issue"}, "Other", current) == []
    assert validate_ticket_changes({"category": "Equipment Issue"}, "Other", None) != []


def test_pin_flag_must_be_boolean():
    assert validate_ticket_changes({"is_pinned": True}) == []
    assert validate_ticket_changes({"is_pinned": None}) == [
        "Field 'is_pinned' must be true or false"
    ]
