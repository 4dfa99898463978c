"""Tests for encryption and password helpers."""

from salesdesk_app.core.crypto import CryptoService, hash_password, mask_id_number, verify_password


def test_encrypt_decrypt_round_trip() -> None:
    key = CryptoService.generate_base64_key()
    crypto = CryptoService.from_base64_key(key)

    cipher = crypto.encrypt_text("012345678901")
    plain = crypto.decrypt_text(cipher)

    assert plain == "012345678901"


def test_password_hash_verification() -> None:
    encoded = hash_password("secret1")

    assert encoded.startswith("scrypt$")
    assert verify_password("secret1", encoded)
    assert not verify_password("secret2", encoded)
    assert not verify_password("secret1", "plain-text")


def test_mask_id_number() -> None:
    assert mask_id_number("012345678901") == "*********901"
    assert mask_id_number("12") == "**"
