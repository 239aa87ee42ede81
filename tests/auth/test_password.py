"""Password hashing and strength rules."""

import pytest

from snapout.auth.password import (
    PasswordStrengthError,
    hash_password,
    validate_password_strength,
    verify_password,
)


class TestHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("SecureP@ss1")
        assert hashed.startswith("$argon2id$")
        assert verify_password("SecureP@ss1", hashed) is True

    def test_wrong_password(self):
        assert verify_password("Wrong", hash_password("SecureP@ss1")) is False

    def test_invalid_hash_never_raises(self):
        assert verify_password("SecureP@ss1", "not-a-hash") is False


class TestStrength:
    def test_strong_password_passes(self):
        validate_password_strength("SecureP@ss1")

    @pytest.mark.parametrize(
        "password",
        ["", "   ", "Sh0rt", "nouppercase1", "NOLOWERCASE1", "NoDigitsHere", "A1" + "a" * 127],
    )
    def test_weak_passwords_rejected(self, password):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength(password)

    def test_strength_error_is_value_error(self):
        assert issubclass(PasswordStrengthError, ValueError)
