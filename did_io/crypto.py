"""Key pair and crypto provider interfaces consumed by DID documents."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyPair(ABC):
    """Key pair representation produced by a CryptoProvider."""

    id: Optional[str]
    controller: Optional[str]
    type: str

    @abstractmethod
    def export(self, public_key: bool = True) -> dict:
        """Export the key as a verification method node."""


class CryptoProvider(ABC):
    """Generates key pairs of the types a DID document intends to support."""

    @abstractmethod
    async def generate(
        self, type: str, controller: Optional[str] = None, **options
    ) -> KeyPair:
        """Generate a key pair of the given type for a controller."""
