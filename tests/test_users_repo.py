import pytest

from taskflow import users_repo
from taskflow.errors import NotFoundError, ValidationError
from taskflow.models import Role


def test_invite_user_creates_plain_user(db):
    user = users_repo.invite_user("  Omar@Example.com ")

    assert user["email"] == "omar@example.com"
    assert user["role"] == "user"
    assert users_repo.get_user(user["id"])["email"] == "omar@example.com"
    assert users_repo.check_user_role(user["id"]) is Role.USER


def test_invite_requires_email(db):
    with pytest.raises(ValidationError):
        users_repo.invite_user("")


def test_invite_existing_email_returns_account(db):
    first = users_repo.invite_user("lena@example.com")
    again = users_repo.invite_user("lena@example.com")

    assert again["id"] == first["id"]
    assert len(users_repo.get_all_users()) == 1


def test_update_user_role(db):
    user = users_repo.invite_user("lena@example.com")

    users_repo.update_user_role(user["id"], "maintainer")

    assert users_repo.check_user_role(user["id"]) is Role.MAINTAINER
    with pytest.raises(ValidationError):
        users_repo.update_user_role(user["id"], "owner")
    with pytest.raises(NotFoundError):
        users_repo.update_user_role("missing", Role.USER)


def test_lookups_for_unknown_users(db):
    assert users_repo.get_user("missing") is None
    assert users_repo.get_user_by_email("") is None
    assert users_repo.check_user_role(None) is None
    assert users_repo.check_user_role("missing") is None
