import json

import pytest

from nexentastor_client.exceptions import (
    ApplianceError,
    RequestError,
    is_already_exists_error,
    is_appliance_error,
    is_authentication_error,
    is_busy_error,
    is_not_found_error,
    parse_appliance_error,
)


@pytest.mark.parametrize(
    ("code", "predicate"),
    [
        ("ENOENT", is_not_found_error),
        ("EEXIST", is_already_exists_error),
        ("EBUSY", is_busy_error),
    ],
)
def test_codes_map_to_predicates(code, predicate):
    body = json.dumps({"name": "NefError", "code": code, "message": "boom"})

    error = parse_appliance_error(body, "DELETE storage/filesystems/p%2Ffs", status_code=422)

    assert is_appliance_error(error)
    assert predicate(error)
    assert error.status_code == 422
    assert "DELETE storage/filesystems/p%2Ffs: boom" in str(error)
    assert code in str(error)


def test_predicates_are_exclusive():
    busy = ApplianceError("EBUSY", "has snapshots")

    assert is_busy_error(busy)
    assert not is_not_found_error(busy)
    assert not is_already_exists_error(busy)


def test_authentication_error_is_recognised_by_name():
    error = parse_appliance_error(
        b'{"name": "AuthenticationError", "message": "Token expired"}', "GET storage/pools"
    )

    assert is_authentication_error(error)


@pytest.mark.parametrize("body", ["", "<html>oops</html>", "[1, 2]", '{"message": "no code"}'])
def test_unparseable_bodies_are_not_classified(body):
    assert parse_appliance_error(body, "ctx") is None


def test_non_appliance_errors_are_never_classified():
    error = RequestError("connection refused")

    assert not is_appliance_error(error)
    assert not is_not_found_error(error)
    assert not is_already_exists_error(None)
