"""Verification relationships.

A verification relationship expresses the relationship between the DID
subject and a verification method. See
https://w3c.github.io/did-core/#verification-relationships
"""

from enum import Enum
from typing import Tuple, Union


class VerificationRelationship(str, Enum):
    """Proof purposes a verification method may be authorized for."""

    AUTHENTICATION = "authentication"
    ASSERTION_METHOD = "assertionMethod"
    KEY_AGREEMENT = "keyAgreement"
    CAPABILITY_INVOCATION = "capabilityInvocation"
    CAPABILITY_DELEGATION = "capabilityDelegation"

    @property
    def attribute(self) -> str:
        """Name of the DIDDocument attribute holding this relationship."""
        return self.name.lower()

    @classmethod
    def has(cls, purpose: Union[str, "VerificationRelationship"]) -> bool:
        """Test whether a purpose is a known verification relationship."""
        return purpose in VERIFICATION_RELATIONSHIPS


VERIFICATION_RELATIONSHIPS: Tuple[str, ...] = tuple(
    relationship.value for relationship in VerificationRelationship
)
