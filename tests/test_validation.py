from dataclasses import dataclass

import pytest

from onexutil.validation import (
    ValidationError,
    Validator,
    get_exported_field_names,
    valid_required,
    validate_all_fields,
    validate_selected_fields,
)


@dataclass
class CreateUserRequest:
    name: str | None = None
    email: str | None = None
    _internal: int = 0


@dataclass
class DeleteUserRequest:
    user_id: str | None = None


@dataclass
class Broken:
    value: int = 0


@dataclass
class Unregistered:
    value: int = 0


class UserValidator:
    def __init__(self):
        self.seen = []

    def validate_create_user_request(self, request):
        self.seen.append(request)
        if not request.name:
            raise ValidationError("name is required")

    def validate_DeleteUserRequest(self, request):
        self.seen.append(request)

    def validate_broken(self, request, extra):
        self.seen.append(request)


class RecordingRules(dict):
    """Rules mapping whose rules record the fields and values they were given."""

    def __init__(self, *fields):
        super().__init__({field: self._rule(field) for field in fields})
        self.seen = []

    def _rule(self, field):
        return lambda value: self.seen.append((field, value))


def test_validator_dispatches_snake_case_method():
    custom = UserValidator()
    validator = Validator(custom)
    request = CreateUserRequest(name="alice")
    validator.validate(request)
    assert custom.seen == [request]


def test_validator_propagates_failure():
    validator = Validator(UserValidator())
    with pytest.raises(ValidationError, match="name is required"):
        validator.validate(CreateUserRequest(name=""))


def test_validator_dispatches_class_name_method():
    custom = UserValidator()
    request = DeleteUserRequest(user_id="42")
    Validator(custom).validate(request)
    assert custom.seen == [request]


def test_validator_ignores_unregistered_and_wrong_signature():
    custom = UserValidator()
    validator = Validator(custom)
    validator.validate(Unregistered())
    validator.validate(Broken())
    assert custom.seen == []


def test_valid_required_accepts_present_fields():
    request = CreateUserRequest(name="alice", email="alice@example.com")
    valid_required(request, "name", "email")
    assert request.name == "alice"


def test_valid_required_missing_field():
    with pytest.raises(ValidationError, match="does not exist"):
        valid_required(CreateUserRequest(name="alice"), "phone")


def test_valid_required_none_field():
    with pytest.raises(ValidationError, match="must be provided"):
        valid_required(CreateUserRequest(name="alice"), "name", "email")


def test_valid_required_rejects_non_object():
    with pytest.raises(TypeError):
        valid_required(42, "name")


def test_get_exported_field_names_skips_private():
    assert get_exported_field_names(CreateUserRequest()) == ["name", "email"]


def test_get_exported_field_names_plain_object():
    class Plain:
        def __init__(self):
            self.alpha = 1
            self._beta = 2
            self.gamma = 3

    assert get_exported_field_names(Plain()) == ["alpha", "gamma"]


def test_get_exported_field_names_non_object():
    assert get_exported_field_names(5) == []


def test_validate_selected_fields_applies_rules_and_skips():
    rules = RecordingRules("name", "email", "_internal")
    request = CreateUserRequest(name="alice", email=None)
    validate_selected_fields(request, rules, "name", "email", "_internal", "missing")
    assert rules.seen == [("name", "alice")]


def test_validate_selected_fields_propagates_rule_error():
    def reject(value):
        raise ValidationError(f"bad email {value}")

    request = CreateUserRequest(name="alice", email="alice@example.com")
    with pytest.raises(ValidationError, match="bad email"):
        validate_selected_fields(request, {"email": reject}, "email")


def test_validate_selected_fields_rejects_non_object():
    with pytest.raises(TypeError):
        validate_selected_fields("text", {}, "name")


def test_validate_all_fields_visits_every_public_field():
    rules = RecordingRules("name", "email")
    validate_all_fields(
        CreateUserRequest(name="alice", email="alice@example.com"), rules
    )
    assert rules.seen == [("name", "alice"), ("email", "alice@example.com")]