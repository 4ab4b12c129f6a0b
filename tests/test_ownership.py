import pytest

from instaclone.core.exceptions import OwnershipRequiredException
from instaclone.services.ownership import ensure_owner, is_owner


@pytest.mark.parametrize(
    "owner_id, acting_id, expected",
    [
        ("u1", "u1", True),
        ("u1", "u2", False),
        (None, "u1", False),
        ("u1", None, False),
        (None, None, False),
    ],
)
def test_is_owner(owner_id, acting_id, expected):
    assert is_owner(owner_id, acting_id) is expected


def test_ensure_owner_denies_with_message():
    with pytest.raises(OwnershipRequiredException) as excinfo:
        ensure_owner("u1", "u2", message="You can only delete your own comments")
    assert excinfo.value.status_code == 403
    assert excinfo.value.message == "You can only delete your own comments"


def test_ensure_owner_allows_owner():
    ensure_owner("u1", "u1", message="unused")
