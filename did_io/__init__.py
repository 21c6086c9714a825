"""DID resolution and DID document lifecycle dispatch."""

from did_io.cache import CacheOptions, MemoizingCache
from did_io.cached import CachedResolver
from did_io.crypto import CryptoProvider, KeyPair
from did_io.document import (
    DIDDocument,
    DIDDocumentError,
    DuplicateService,
    MissingCryptoProvider,
    MissingIdError,
    UnsupportedPurpose,
)
from did_io.driver import MethodDriver
from did_io.relationships import VERIFICATION_RELATIONSHIPS, VerificationRelationship
from did_io.resolver import (
    DIDMethodNotSupported,
    DIDNotFound,
    DIDResolutionError,
    DIDResolver,
    UnsupportedOperation,
)
from did_io.syntax import (
    DIDSyntaxError,
    EmptyDIDError,
    InvalidDIDError,
    InvalidDIDUrlError,
    is_valid_did,
    is_valid_did_url,
    parse_did,
    parse_did_url,
    validate_did,
)


__all__ = [
    "CacheOptions",
    "CachedResolver",
    "CryptoProvider",
    "DIDDocument",
    "DIDDocumentError",
    "DIDMethodNotSupported",
    "DIDNotFound",
    "DIDResolutionError",
    "DIDResolver",
    "DIDSyntaxError",
    "DuplicateService",
    "EmptyDIDError",
    "InvalidDIDError",
    "InvalidDIDUrlError",
    "KeyPair",
    "MemoizingCache",
    "MethodDriver",
    "MissingCryptoProvider",
    "MissingIdError",
    "UnsupportedOperation",
    "UnsupportedPurpose",
    "VERIFICATION_RELATIONSHIPS",
    "VerificationRelationship",
    "is_valid_did",
    "is_valid_did_url",
    "parse_did",
    "parse_did_url",
    "validate_did",
]
