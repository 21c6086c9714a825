"""DID method driver interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping

from did_io.document import DIDDocument

REQUIRED_OPERATIONS = ("get", "generate", "update", "register")


class MethodDriver(ABC):
    """Contract a DID method implementation must satisfy.

    Drivers are registered with a resolver under their ``method`` name, the
    token following ``did:`` in the DIDs they handle.
    """

    method: str

    @abstractmethod
    async def get(self, did: str, **options) -> Dict[str, Any]:
        """Fetch the JSON DID document for a DID."""

    @abstractmethod
    async def generate(self, **options) -> Mapping[str, Any]:
        """Generate a new DID document and its key pairs.

        Returns:
            a mapping with ``did_document`` and ``key_pairs`` entries
        """

    @abstractmethod
    async def update(self, did_document: DIDDocument, **options) -> Any:
        """Commit changes to a DID document."""

    @abstractmethod
    async def register(self, did_document: DIDDocument, **options) -> Any:
        """Register a new DID document."""

    async def is_resolvable(self, did: str) -> bool:
        """Check to see if a DID is resolvable by this driver."""
        return True

    @classmethod
    def __subclasshook__(cls, subclass):
        """Accept any class implementing every driver operation."""
        if cls is MethodDriver:
            return all(
                callable(getattr(subclass, name, None)) for name in REQUIRED_OPERATIONS
            )
        return NotImplemented


def check_driver(driver: Any) -> MethodDriver:
    """Ensure an object conforms to the MethodDriver interface."""
    if not isinstance(driver, MethodDriver):
        missing = [
            name
            for name in REQUIRED_OPERATIONS
            if not callable(getattr(driver, name, None))
        ]
        raise TypeError(
            f"{type(driver).__name__} is not a DID method driver; "
            f"missing operations: {', '.join(missing)}"
        )
    return driver
