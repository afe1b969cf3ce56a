from __future__ import annotations

import pytest

from college_portal.core.enums import Role
from college_portal.core.exceptions import AuthenticationError, ValidationError


def test_role_is_derived_from_email(container):
    auth = container.auth_service

    assert auth.role_for_email("admin@sgs.com") == Role.ADMIN
    assert auth.role_for_email("1001@sgsteacher.com") == Role.TEACHER
    assert auth.role_for_email("t1001@sgsteacher.com") == Role.STUDENT
    assert auth.role_for_email("cs1@sgs.com") == Role.STUDENT


def test_create_account_validates_email_and_password(container):
    auth = container.auth_service

    with pytest.raises(ValidationError, match="Email is required"):
        auth.create_account(email=" ", password="secret1")
    with pytest.raises(ValidationError, match="at least 6"):
        auth.create_account(email="x@sgs.com", password="123")

    auth.create_account(email="X@sgs.com", password="secret1")
    with pytest.raises(ValidationError, match="already exists"):
        auth.create_account(email="x@sgs.com", password="secret1")


def test_teacher_sign_in_carries_profile_and_flags(container, school):
    user = school.teacher

    assert user.role == Role.TEACHER
    assert user.profile_id == "1001"
    assert user.name == "Asha Rao"
    assert not user.can_handle_accounts

    container.teacher_service.set_account_handler("1001", True)
    again = container.auth_service.sign_in("1001@sgsteacher.com", "teacher123")
    assert again.can_handle_accounts


def test_student_sign_in_uses_default_password(container, school):
    user = container.auth_service.sign_in("CS2@sgs.com", "123456")

    assert user.role == Role.STUDENT
    assert user.profile_id == str(school.student_ids["CS2"])


def test_admin_sign_in(container):
    container.auth_service.create_account(email="admin@sgs.com", password="admin123")

    user = container.auth_service.sign_in("admin@sgs.com", "admin123")

    assert user.role == Role.ADMIN
    assert user.has_admin_rights


def test_wrong_password_and_unknown_email_are_rejected(container, school):
    with pytest.raises(AuthenticationError):
        container.auth_service.sign_in("1001@sgsteacher.com", "wrong-pass")
    with pytest.raises(AuthenticationError):
        container.auth_service.sign_in("nobody@sgs.com", "whatever")


def test_password_reset_round_trip(container, school, mailer):
    token = container.auth_service.request_password_reset("1001@sgsteacher.com")

    assert mailer.sent == [("1001@sgsteacher.com", token)]
    container.auth_service.reset_password(token, "brand-new")
    assert container.auth_service.sign_in("1001@sgsteacher.com", "brand-new").profile_id == "1001"


def test_password_reset_for_unknown_email_sends_nothing(container, mailer):
    assert container.auth_service.request_password_reset("ghost@sgs.com") is None
    assert mailer.sent == []


def test_tampered_reset_token_is_rejected(container, school):
    token = container.auth_service.request_password_reset("1001@sgsteacher.com")

    with pytest.raises(ValidationError, match="invalid"):
        container.auth_service.reset_password(token + "x", "brand-new")


def test_reset_token_works_only_once(container, school):
    token = container.auth_service.request_password_reset("1001@sgsteacher.com")
    container.auth_service.reset_password(token, "brand-new")

    with pytest.raises(ValidationError, match="already been used"):
        container.auth_service.reset_password(token, "second-try")
    assert container.auth_service.sign_in("1001@sgsteacher.com", "brand-new").profile_id == "1001"


def test_older_reset_token_dies_when_a_newer_one_is_used(container, school):
    first = container.auth_service.request_password_reset("1001@sgsteacher.com")
    second = container.auth_service.request_password_reset("1001@sgsteacher.com")
    container.auth_service.reset_password(second, "brand-new")

    with pytest.raises(ValidationError, match="already been used"):
        container.auth_service.reset_password(first, "other-pass")
