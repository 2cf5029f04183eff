from __future__ import annotations

import pytest

from user_service.application.services.password_hashing import (
    WerkzeugPasswordHasher,
    ensure_hasher_ready,
)
from user_service.domain.accounts.exceptions import HashingFailureError


@pytest.fixture(scope="module")
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher()


def test_verify_accepts_matching_password(hasher: WerkzeugPasswordHasher) -> None:
    digest = hasher.hash("correct horse")

    assert digest != "correct horse"
    assert digest.startswith("scrypt:")
    assert hasher.verify("correct horse", digest)


def test_verify_rejects_other_password(hasher: WerkzeugPasswordHasher) -> None:
    digest = hasher.hash("first-password")

    assert not hasher.verify("second-password", digest)


def test_same_password_hashes_differently(hasher: WerkzeugPasswordHasher) -> None:
    first = hasher.hash("repeatable")
    second = hasher.hash("repeatable")

    assert first != second
    assert hasher.verify("repeatable", first)
    assert hasher.verify("repeatable", second)


@pytest.mark.parametrize("digest", ["", "not-a-digest", "scrypt:broken", "plain$text"])
def test_verify_never_raises_on_malformed_digest(
    hasher: WerkzeugPasswordHasher, digest: str
) -> None:
    assert hasher.verify("whatever", digest) is False


def test_verify_rejects_non_string_input(hasher: WerkzeugPasswordHasher) -> None:
    digest = hasher.hash("value")

    assert hasher.verify(None, digest) is False  # type: ignore[arg-type]
    assert hasher.verify("value", None) is False  # type: ignore[arg-type]


def test_ensure_hasher_ready_passes_for_working_hasher(hasher: WerkzeugPasswordHasher) -> None:
    ensure_hasher_ready(hasher)


def test_ensure_hasher_ready_raises_for_unknown_method() -> None:
    with pytest.raises(HashingFailureError) as exc_info:
        ensure_hasher_ready(WerkzeugPasswordHasher(method="no-such-method"))

    assert exc_info.value.code == "hashing_failure"
