"""did:key driver.

A did:key document is derived entirely from the identifier, so there is
nothing to update or register. See https://w3c-ccg.github.io/did-method-key/
"""

import re
from typing import Any, Dict, Optional

from did_io.crypto import CryptoProvider
from did_io.document import DIDDocument, MissingCryptoProvider
from did_io.driver import MethodDriver
from did_io.multiformats import multibase
from did_io.resolver import DIDResolutionError, UnsupportedOperation

DEFAULT_KEY_TYPE = "Ed25519VerificationKey2020"

SIGNING_RELATIONSHIPS = (
    "authentication",
    "assertionMethod",
    "capabilityDelegation",
    "capabilityInvocation",
)


class DIDKey(MethodDriver):
    """did:key driver."""

    method = "key"

    PATTERN = re.compile(r"^did:key:(?P<multikey>z[1-9A-HJ-NP-Za-km-z]+)(#.*)?$")

    def __init__(self, crypto: Optional[CryptoProvider] = None):
        """Initialize the driver.

        Args:
            crypto: provider used by ``generate``; resolution needs none
        """
        self.crypto = crypto

    async def is_resolvable(self, did: str) -> bool:
        """Check to see if DID is resolvable by this driver."""
        return bool(self.PATTERN.match(did))

    async def get(self, did: str, **options) -> Dict[str, Any]:
        """Resolve a did:key to its JSON document.

        Given a key id (``did:key:z...#z...``) rather than a DID, only the
        verification method for that key is returned.
        """
        match = self.PATTERN.match(did)
        if not match:
            raise DIDResolutionError(f"Invalid DID: {did}")
        multikey = match.group("multikey")
        try:
            multibase.decode(multikey)
        except ValueError as e:
            raise DIDResolutionError(f"Invalid did:key multikey: {multikey}") from e

        root = f"did:key:{multikey}"
        method = {
            "id": f"{root}#{multikey}",
            "type": "Multikey",
            "controller": root,
            "publicKeyMultibase": multikey,
        }
        if "#" in did:
            if did != method["id"]:
                raise DIDResolutionError(f"Key {did} not found in {root}")
            return method
        return self._document(root, method)

    async def generate(
        self, type: str = DEFAULT_KEY_TYPE, **options
    ) -> Dict[str, Any]:
        """Generate a key pair and the did:key document derived from it."""
        if not self.crypto:
            raise MissingCryptoProvider(
                "Please provide a crypto provider to generate keys."
            )
        key = await self.crypto.generate(type=type, **options)
        multikey = key.export(public_key=True)["publicKeyMultibase"]

        did = f"did:key:{multikey}"
        key.controller = did
        key.id = f"{did}#{multikey}"

        return {
            "did_document": DIDDocument.deserialize(
                self._document(did, key.export(public_key=True))
            ),
            "key_pairs": {key.id: key},
        }

    async def update(self, did_document: DIDDocument, **options):
        """did:key documents cannot be updated."""
        raise UnsupportedOperation("did:key documents cannot be updated")

    async def register(self, did_document: DIDDocument, **options):
        """did:key documents need no registration."""
        raise UnsupportedOperation("did:key documents cannot be registered")

    @staticmethod
    def _document(did: str, method: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "@context": [
                "https://www.w3.org/ns/did/v1",
                "https://w3id.org/security/multikey/v1",
            ],
            "id": did,
            "verificationMethod": [method],
            **{rel: [method["id"]] for rel in SIGNING_RELATIONSHIPS},
        }
