"""Canonical form of signed URLs.

Signers compute the signature in a browser or worker runtime over the WHATWG
``URL.href`` left after ``url.searchParams.delete("sig")``. The serializer
here reproduces that string: the host is normalized by httpx, the path and
fragment are percent-encoded with the WHATWG encode sets, and the query is
re-serialized as ``application/x-www-form-urlencoded``.
"""

from urllib.parse import parse_qsl, quote_plus, urlsplit

import httpx

from edgekit.errors import InvalidURLError

SIGNATURE_PARAM = "sig"

SPECIAL_SCHEMES = frozenset({"ftp", "file", "http", "https", "ws", "wss"})

# Leading and trailing characters the WHATWG parser strips
_C0_CONTROL_OR_SPACE = "".join(chr(i) for i in range(0x21))
_TAB_OR_NEWLINE = {ord("\t"): None, ord("\n"): None, ord("\r"): None}

# Printable ASCII that is percent-encoded, besides C0 controls and non-ASCII
_PATH_ENCODE_SET = frozenset(' "#<>?`{}')
_FRAGMENT_ENCODE_SET = frozenset(' "<>`')

_SINGLE_DOT = frozenset({".", "%2e"})
_DOUBLE_DOT = frozenset({"..", ".%2e", "%2e.", "%2e%2e"})


def _percent_encode(text: str, encode_set: frozenset) -> str:
    encoded = []
    for char in text:
        if char in encode_set or not 0x20 <= ord(char) <= 0x7E:
            encoded.extend(f"%{b:02X}" for b in char.encode("utf-8", "replace"))
        else:
            encoded.append(char)
    return "".join(encoded)


def _form_quote(text: str) -> str:
    # The form serializer leaves only alphanumerics and *-._ unescaped
    return quote_plus(text, safe="*").replace("~", "%7E")


def form_urlencode(pairs: list[tuple[str, str]]) -> str:
    """Serialize name/value pairs as application/x-www-form-urlencoded."""
    return "&".join(f"{_form_quote(name)}={_form_quote(value)}" for name, value in pairs)


def _serialize_path(path: str, special: bool) -> str:
    if not path:
        return "/" if special else ""

    segments: list[str] = []
    parts = path.split("/")[1:]
    for index, part in enumerate(parts):
        last = index == len(parts) - 1
        lowered = part.lower()
        if lowered in _DOUBLE_DOT:
            if segments:
                segments.pop()
            if last:
                segments.append("")
        elif lowered in _SINGLE_DOT:
            if last:
                segments.append("")
        else:
            segments.append(_percent_encode(part, _PATH_ENCODE_SET))

    return "".join(f"/{segment}" for segment in segments)


class SignedURL:
    """
    A parsed signed URL.

    Attributes:
        signature: The first ``sig`` value, or None
        canonical: The URL as it was signed, every ``sig`` removed
    """

    def __init__(self, url: str):
        if not isinstance(url, str):
            raise InvalidURLError("url")

        url = url.strip(_C0_CONTROL_OR_SPACE).translate(_TAB_OR_NEWLINE)
        special = url.partition(":")[0].lower() in SPECIAL_SCHEMES
        if special:
            url = url.replace("\\", "/")

        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL:
            raise InvalidURLError("url") from None
        if not parsed.is_absolute_url:
            raise InvalidURLError("url")

        rest, has_fragment, fragment = url.partition("#")
        rest, _, query = rest.partition("?")
        try:
            path = urlsplit(rest).path
        except ValueError:
            raise InvalidURLError("url") from None

        pairs = parse_qsl(query, keep_blank_values=True)
        self.signature = next(
            (value for name, value in pairs if name == SIGNATURE_PARAM), None
        )
        remaining = [(name, value) for name, value in pairs if name != SIGNATURE_PARAM]

        userinfo = parsed.userinfo.decode("ascii")
        href = f"{parsed.scheme}://"
        if userinfo:
            href += f"{userinfo}@"
        href += parsed.netloc.decode("ascii")
        href += _serialize_path(path, special)
        if remaining:
            href += f"?{form_urlencode(remaining)}"
        if has_fragment:
            href += f"#{_percent_encode(fragment, _FRAGMENT_ENCODE_SET)}"

        self.canonical = href

