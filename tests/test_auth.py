import pytest

from courtbot.auth import authenticate
from courtbot.errors import CONFIGURATION_ERROR, INVALID_CREDENTIAL, MISSING_CREDENTIAL


@pytest.mark.parametrize("provided", [None, "", "wrong", "secret"])
def test_configuration_checked_first(provided):
    failure = authenticate(None, provided)
    assert failure.kind == CONFIGURATION_ERROR
    assert failure.status_code == 500
    assert authenticate("", provided).kind == CONFIGURATION_ERROR


def test_missing_credential():
    failure = authenticate("secret", None)
    assert failure.kind == MISSING_CREDENTIAL
    assert failure.status_code == 401


def test_invalid_credential():
    failure = authenticate("secret", "Secret")
    assert failure.kind == INVALID_CREDENTIAL
    assert failure.status_code == 401
    assert "Invalid API key" in failure.message


def test_exact_match_accepted():
    assert authenticate("secret", "secret") is None
