import pytest

from eventdesk.utils import role_permissions as rp


def test_validate_role_accepts_known_roles():
    for role in rp.get_allowed_roles():
        rp.validate_role(role)


def test_validate_role_rejects_unknown():
    with pytest.raises(ValueError):
        rp.validate_role("OWNER")


@pytest.mark.parametrize(
    "role,write,manage,restricted,review",
    [
        ("SUPER_ADMIN", True, True, False, True),
        ("ADMIN", True, True, False, True),
        ("ORGANIZER", True, False, False, False),
        ("REVIEWER", False, False, True, True),
        ("SUBMITTER", False, False, True, False),
        (None, False, False, False, False),
    ],
)
def test_role_groups(role, write, manage, restricted, review):
    assert rp.role_allows_write(role) is write
    assert rp.role_allows_manage(role) is manage
    assert rp.role_is_restricted(role) is restricted
    assert rp.role_allows_review(role) is review


def test_invitable_roles_exclude_super_admin_and_submitter():
    assert rp.INVITABLE_ROLES == {"ADMIN", "ORGANIZER", "REVIEWER"}
