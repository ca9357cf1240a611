"""
User directory: registration defaults, uniqueness, bcrypt credentials and
admin-side permission management.
"""
from __future__ import annotations

import pytest

from yearboard.dashboard.errors import BadRequest, Forbidden, NotFound, Unauthorized
from yearboard.identity_access.domain import YearSet
from yearboard.identity_access.passwords import PasswordHasher


def _register(directory, **overrides):
    fields = {
        "username": "newbie",
        "password": "secret1",
        "first_name": "New",
        "last_name": "Student",
        "email": "newbie@college.edu",
    }
    fields.update(overrides)
    return directory.register(**fields)


def test_register_creates_year1_student_with_year1_access_only(directory):
    user = _register(directory)
    assert user.role == "student"
    assert user.year == 1
    assert user.can_access_years == YearSet([1])
    assert user.can_edit_years == YearSet()


def test_register_stores_bcrypt_hash_not_plaintext(directory):
    user = _register(directory)
    assert user.password_hash != "secret1"
    assert user.password_hash.startswith("$2")


def test_register_rejects_duplicate_username(directory):
    _register(directory)
    with pytest.raises(BadRequest) as exc:
        _register(directory, email="other@college.edu")
    assert exc.value.code == "username_taken"


def test_register_rejects_duplicate_email_case_insensitive(directory):
    _register(directory)
    with pytest.raises(BadRequest) as exc:
        _register(directory, username="other", email="NEWBIE@College.edu")
    assert exc.value.code == "email_taken"


@pytest.mark.parametrize(
    "overrides,code",
    [
        ({"username": "ab"}, "invalid_username"),
        ({"password": "12345"}, "invalid_password"),
        ({"password": None}, "invalid_password"),
        ({"first_name": "  "}, "invalid_first_name"),
        ({"last_name": 3}, "invalid_last_name"),
        ({"email": "no-at-sign"}, "invalid_email"),
        ({"email": "@college.edu"}, "invalid_email"),
    ],
)
def test_register_validates_fields(directory, overrides, code):
    with pytest.raises(BadRequest) as exc:
        _register(directory, **overrides)
    assert exc.value.code == code


def test_create_user_rejects_invalid_year_sets(directory):
    with pytest.raises(BadRequest) as exc:
        directory.create_user(
            username="mentor", password="password", first_name="M", last_name="M",
            email="m@college.edu", year=4, can_access_years=[4], can_edit_years=[3],
        )
    assert exc.value.code == "invalid_can_access_years"


def test_authenticate_checks_password(directory):
    user = _register(directory)
    assert directory.authenticate("newbie", "secret1").id == user.id
    assert directory.authenticate("newbie", "wrong-pass") is None
    assert directory.authenticate("ghost", "secret1") is None
    assert directory.authenticate(None, None) is None


def test_list_users_is_admin_only(directory, admin, make_user):
    student = make_user()
    with pytest.raises(Unauthorized):
        directory.list_users(None)
    with pytest.raises(Forbidden):
        directory.list_users(student)
    assert [u.id for u in directory.list_users(admin)] == [admin.id, student.id]


def test_admin_grants_edit_rights_without_touching_access(directory, admin, make_user):
    student = make_user(year=2, can_access_years=[2])
    updated = directory.update_user(admin, student.id, {"can_edit_years": [1]})
    assert updated.can_edit_years == YearSet([1])
    assert updated.can_access_years == YearSet([2])
    assert directory.get(student.id).can_edit_years == YearSet([1])


def test_update_user_rejections(directory, admin, make_user):
    student = make_user()
    with pytest.raises(Unauthorized):
        directory.update_user(None, student.id, {"year": 2})
    with pytest.raises(Forbidden):
        directory.update_user(student, student.id, {"can_edit_years": [1, 2, 3]})
    with pytest.raises(NotFound):
        directory.update_user(admin, 999, {"year": 2})
    with pytest.raises(BadRequest) as exc:
        directory.update_user(admin, student.id, {"password_hash": "x"})
    assert exc.value.code == "invalid_field"
    with pytest.raises(BadRequest) as exc:
        directory.update_user(admin, student.id, {})
    assert exc.value.code == "empty_payload"
    with pytest.raises(BadRequest) as exc:
        directory.update_user(admin, student.id, {"can_access_years": [0]})
    assert exc.value.code == "invalid_can_access_years"


def test_password_hasher_rejects_malformed_hash():
    hasher = PasswordHasher(rounds=4)
    assert hasher.verify("password", "not-a-bcrypt-hash") is False
    assert hasher.verify("", hasher.hash("password")) is False


def test_password_hasher_rejects_out_of_range_rounds():
    with pytest.raises(ValueError):
        PasswordHasher(rounds=2)


@pytest.mark.parametrize("role,year", [("admin", 2), ("student", 0)])
def test_create_user_rejects_role_year_mismatch(directory, role, year):
    with pytest.raises(BadRequest) as exc:
        directory.create_user(
            username="mismatch", password="password", first_name="M", last_name="M",
            email="mismatch@college.edu", role=role, year=year,
        )
    assert exc.value.code == "role_year_mismatch"


def test_update_user_checks_role_against_resulting_year(directory, admin, make_user):
    student = make_user(year=3, can_access_years=[3])

    with pytest.raises(BadRequest) as exc:
        directory.update_user(admin, student.id, {"role": "admin"})
    assert exc.value.code == "role_year_mismatch"
    with pytest.raises(BadRequest) as exc:
        directory.update_user(admin, student.id, {"year": 0})
    assert exc.value.code == "role_year_mismatch"
    assert directory.get(student.id).role == "student"
    assert directory.get(student.id).year == 3

    promoted = directory.update_user(admin, student.id, {"role": "admin", "year": 0})
    assert (promoted.role, promoted.year) == ("admin", 0)

    with pytest.raises(BadRequest):
        directory.update_user(admin, admin.id, {"role": "student"})
    demoted = directory.update_user(admin, promoted.id, {"role": "student", "year": 4})
    assert (demoted.role, demoted.year) == ("student", 4)
