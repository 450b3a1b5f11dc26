import hashlib

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature
from jwcrypto import jwk

from edgekit.codec import bytes_to_base64url
from edgekit.config import get_settings


@pytest.fixture(scope="session")
def private_key():
    """A fresh ECDSA P-521 signing key for the test session."""
    return ec.generate_private_key(ec.SECP521R1())


@pytest.fixture(scope="session")
def public_jwk(private_key) -> str:
    """The matching public key as a JWK string."""
    return jwk.JWK.from_pyca(private_key.public_key()).export_public()


@pytest.fixture(scope="session")
def sign(private_key):
    """
    Sign data the way a WebCrypto client does (raw r || s, base64URL).

    Pass ``tamper=True`` to flip the first byte of the signature.
    """
    def _sign(data: bytes, tamper: bool = False) -> str:
        der = private_key.sign(data, ec.ECDSA(hashes.SHA512()))
        r, s = decode_dss_signature(der)
        raw = bytearray(r.to_bytes(66, "big") + s.to_bytes(66, "big"))
        if tamper:
            raw[0] ^= 0x01
        return bytes_to_base64url(bytes(raw))
    return _sign


@pytest.fixture
def hash_token():
    """Compute the stored hash for a token, optionally corrupting one byte."""
    def _hash(token: str, tamper: bool = False) -> str:
        digest = bytearray(hashlib.sha512(token.encode("latin-1")).digest())
        if tamper:
            digest[0] = (digest[0] + 1) % 256
        return bytes_to_base64url(bytes(digest))
    return _hash


@pytest.fixture
def settings_env(monkeypatch, tmp_path):
    """
    Set EDGEKIT_* environment variables and reset the cached settings.

    Usage:
        settings_env(token_hash="...", public_key="...")
    """
    for name in ("TOKEN_HASH", "PUBLIC_KEY", "DEBUG", "CORS_ORIGINS"):
        monkeypatch.delenv(f"EDGEKIT_{name}", raising=False)
    monkeypatch.chdir(tmp_path)  # keep a stray .env out of the way

    def _set(**values):
        for key, value in values.items():
            monkeypatch.setenv(f"EDGEKIT_{key.upper()}", value)
        get_settings.cache_clear()
        return get_settings()

    _set()
    yield _set
    get_settings.cache_clear()
