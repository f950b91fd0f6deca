"""
HMAC signature generation and verification for webhook payloads.

Signatures use the "<algo>=<lowercase hex digest>" format sent by GitHub
(X-Hub-Signature-256: sha256=...), so they interoperate with it byte for byte.
"""

import hashlib
import hmac
from typing import Callable

from hookbridge.core.exceptions import UnsupportedAlgorithmError
from hookbridge.models.enums import SignatureMethod


def _to_bytes(value: bytes | str) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


class SignatureValidator:
    """
    HMAC signer/verifier for one digest algorithm.

    Subclasses set ``prefix`` and ``digestmod``.
    """

    prefix: str = ""
    digestmod: Callable = hashlib.sha256

    def generate(self, payload: bytes | str, secret: str) -> str:
        """
        Sign a payload.

        Args:
            payload: Raw body exactly as sent on the wire
            secret: Shared secret

        Returns:
            Signature string, e.g. "sha256=5d41..."
        """
        digest = hmac.new(
            secret.encode("utf-8"),
            _to_bytes(payload),
            self.digestmod,
        ).hexdigest()
        return f"{self.prefix}={digest}"

    def verify(self, payload: bytes | str, signature: str, secret: str) -> bool:
        """
        Check a signature in constant time.

        A signature of a different length simply fails to match.
        """
        expected = self.generate(payload, secret)
        return hmac.compare_digest(_to_bytes(signature), expected.encode("utf-8"))


class HmacSha256Validator(SignatureValidator):
    prefix = "sha256"
    digestmod = hashlib.sha256


class HmacSha1Validator(SignatureValidator):
    prefix = "sha1"
    digestmod = hashlib.sha1


SIGNATURE_VALIDATORS: dict[SignatureMethod, SignatureValidator] = {
    SignatureMethod.HMAC_SHA256: HmacSha256Validator(),
    SignatureMethod.HMAC_SHA1: HmacSha1Validator(),
}


def get_signature_validator(method: SignatureMethod | str) -> SignatureValidator:
    """
    Look up the validator for a signature method.

    Raises:
        UnsupportedAlgorithmError: If no validator handles the method
    """
    try:
        return SIGNATURE_VALIDATORS[SignatureMethod(method)]
    except (ValueError, KeyError):
        raise UnsupportedAlgorithmError(str(getattr(method, "value", method)))
