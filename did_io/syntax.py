"""DID and DID URL syntax.

Patterns follow the DID Core ABNF as exercised by the W3C did-test-suite:
https://w3c.github.io/did-core/#did-syntax
"""

import re
from dataclasses import dataclass
from typing import Optional

DID_PATTERN = re.compile(
    r"did:(?P<method>[a-z0-9]+):"
    r"(?P<method_specific_id>(?:[a-zA-Z0-9\.\-_]|%[0-9a-fA-F]{2}|:)+)"
)

_PCHAR = r"(?:[a-zA-Z0-9\-\._~]|%[0-9a-fA-F]{2}|[!$&'()*+,;=:@])"
DID_URL_PATTERN = re.compile(
    r"did:"
    r"(?P<method>[a-z0-9]+)"
    r"(?P<method_specific_id>(?::(?:[a-zA-Z0-9\.\-_]|%[0-9a-fA-F]{2})+)+)"
    rf"(?P<path>(?:/{_PCHAR}+)+)?"
    rf"(?P<query>\?(?:{_PCHAR}|/|\?)+)?"
    rf"(?P<fragment>#(?:{_PCHAR}|/|\?)+)?"
)

URL_DELIMITERS = ("/", "?", "#")


class EmptyDIDError(ValueError):
    """Raised when a DID is missing or empty."""


class DIDSyntaxError(ValueError):
    """Raised when a DID or DID URL does not match the DID Core syntax."""

    code: str = "invalidDid"

    def __init__(self, message: str, code: Optional[str] = None):
        """Initialize the error."""
        super().__init__(message)
        if code:
            self.code = code


class InvalidDIDError(DIDSyntaxError):
    """Raised for an invalid DID."""

    code = "invalidDid"


class InvalidDIDUrlError(DIDSyntaxError):
    """Raised for an invalid DID URL."""

    code = "invalidDidUrl"


@dataclass(frozen=True)
class ParsedDID:
    """Components of a DID used for method routing."""

    prefix: str


@dataclass(frozen=True)
class DIDUrlParts:
    """A DID URL split into its root DID and optional components."""

    did: str
    method: str
    path: Optional[str] = None
    query: Optional[str] = None
    fragment: Optional[str] = None


def parse_did(did: str) -> ParsedDID:
    """Extract the method prefix from a DID.

    The prefix is the segment immediately following ``did:``, so
    ``did:v1:test:nym:abcd`` yields ``v1``. This is the only place in the
    package that splits a DID for routing.
    """
    if not did:
        raise EmptyDIDError("DID cannot be empty.")
    if not isinstance(did, str):
        raise TypeError("DID must be a string.")

    segments = did.split(":")
    prefix = segments[1] if len(segments) > 1 else ""
    return ParsedDID(prefix=prefix)


def is_valid_did(did) -> bool:
    """Check whether a value is a syntactically valid DID."""
    if not isinstance(did, str):
        return False
    # The pattern alone would accept a trailing colon segment
    return bool(DID_PATTERN.fullmatch(did)) and not did.endswith(":")


def is_valid_did_url(did_url) -> bool:
    """Check whether a value is a syntactically valid DID URL."""
    if not isinstance(did_url, str):
        return False
    return bool(DID_URL_PATTERN.fullmatch(did_url))


def validate_did(did) -> None:
    """Validate a DID or DID URL, raising on failure.

    Values containing a path, query or fragment delimiter are validated as
    DID URLs; anything else must be a plain DID.

    Raises:
        TypeError: if the value is missing or not a string
        InvalidDIDUrlError: if a DID URL is malformed
        InvalidDIDError: if a DID is malformed
    """
    if not did or not isinstance(did, str):
        raise TypeError(f"The DID must be a non-empty string; got {did!r}.")

    if any(delimiter in did for delimiter in URL_DELIMITERS):
        if not is_valid_did_url(did):
            raise InvalidDIDUrlError(f"Invalid DID URL: {did}")
        return

    if not is_valid_did(did):
        raise InvalidDIDError(f"Invalid DID: {did}")


def parse_did_url(did_url: str) -> DIDUrlParts:
    """Split a DID URL into its root DID, path, query and fragment.

    Raises:
        InvalidDIDUrlError: on invalid inputs
    """
    match = DID_URL_PATTERN.fullmatch(did_url) if isinstance(did_url, str) else None
    if not match:
        raise InvalidDIDUrlError(f"Invalid DID URL: {did_url}")

    return DIDUrlParts(
        did=f"did:{match.group('method')}{match.group('method_specific_id')}",
        method=match.group("method"),
        path=match.group("path"),
        query=match.group("query")[1:] if match.group("query") else None,
        fragment=match.group("fragment")[1:] if match.group("fragment") else None,
    )
