"""Role gate and bearer parsing: pure functions, no app needed."""

import pytest

from tasktrack.auth.dependencies import RequestIdentity, authorize, extract_bearer_token
from tasktrack.errors import Forbidden, Unauthenticated

ANA = RequestIdentity(id="user-1", role="user")
ROOT = RequestIdentity(id="user-2", role="admin")


def test_empty_role_set_admits_any_identity():
    assert authorize(ANA, set()) is ANA
    assert authorize(ROOT, ()) is ROOT


def test_role_in_allowed_set():
    assert authorize(ROOT, {"admin"}) is ROOT
    assert authorize(ANA, {"user", "admin"}) is ANA


def test_role_not_in_allowed_set_is_forbidden():
    with pytest.raises(Forbidden):
        authorize(ANA, {"admin"})


def test_missing_identity_is_unauthenticated():
    with pytest.raises(Unauthenticated):
        authorize(None, set())
    with pytest.raises(Unauthenticated):
        authorize(None, {"admin"})


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("Bearer   padded  ", "padded"),
        ("Bearer ", None),
        ("Bearer", None),
        ("bearer abc", None),
        ("Token abc", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected
