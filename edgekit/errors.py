"""Errors raised when verification input is malformed.

A wrong credential is never an error: the verification functions return
``False`` for it. Everything here means the caller handed over input that
could not be checked at all.
"""


class VerificationError(Exception):
    """Base class for malformed verification input."""

    def __init__(self, message: str, parameter: str | None = None):
        super().__init__(message)
        self.parameter = parameter


class FormatError(VerificationError, ValueError):
    """A value is not a non-empty base64URL string."""

    def __init__(self, parameter: str, reason: str | None = None):
        message = reason or (
            f"{parameter} is empty or contains character "
            "not in the base64URL character set"
        )
        super().__init__(message, parameter)


class CodePointError(VerificationError, ValueError):
    """A string contains a character outside Latin-1."""

    def __init__(self, parameter: str = "string"):
        super().__init__(
            f"{parameter} contains character with code point higher than 255",
            parameter,
        )


class LengthError(VerificationError, ValueError):
    """A decoded value does not have the required number of bytes."""

    def __init__(self, parameter: str, expected: int):
        super().__init__(f"{parameter} is not {expected} bytes", parameter)
        self.expected = expected


class MissingSignatureError(VerificationError, LookupError):
    """A signed URL carries no signature."""

    def __init__(self, parameter: str = "url"):
        super().__init__("signature is missing", parameter)


class InvalidPublicKeyError(VerificationError, ValueError):
    """The public key is not a usable ECDSA P-521 JSON Web Key."""

    def __init__(self, reason: str, parameter: str = "public_key"):
        super().__init__(f"{parameter} {reason}", parameter)


class InvalidURLError(VerificationError, ValueError):
    """The signed URL cannot be parsed as an absolute URL."""

    def __init__(self, parameter: str = "url"):
        super().__init__(f"{parameter} is not a valid absolute URL", parameter)
