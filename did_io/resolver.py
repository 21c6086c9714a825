"""DID Resolver."""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from pydid import DIDUrl
from pydid.did_url import InvalidDIDUrlError

from did_io.document import DIDDocument
from did_io.driver import MethodDriver, check_driver
from did_io.syntax import EmptyDIDError, is_valid_did, is_valid_did_url, parse_did

LOG = logging.getLogger(__name__)


class DIDResolutionError(Exception):
    """Represents an error from a DID Resolver."""


class DIDNotFound(DIDResolutionError):
    """Represents a DID not found error."""


class DIDMethodNotSupported(DIDResolutionError):
    """Raised when no driver is registered for a DID method."""


class UnsupportedOperation(DIDResolutionError):
    """Raised by drivers for lifecycle operations their method lacks."""


class DIDResolver:
    """DID Resolver delegating to method drivers by DID method prefix.

    Drivers are registered once, at setup, through ``use``; registering while
    lookups are in flight is not supported. Every operation routes through
    ``method_for_did`` so there is a single place deciding which driver
    handles a DID.
    """

    def __init__(self, drivers: Optional[Dict[str, MethodDriver]] = None):
        """Initialize the resolver."""
        self.drivers: Dict[str, MethodDriver] = {}
        for prefix, driver in (drivers or {}).items():
            self.use(prefix, driver)

    def use(self, prefix: str, driver: MethodDriver):
        """Register a driver for a DID method, replacing any previous one."""
        self.drivers[prefix] = check_driver(driver)
        LOG.info("Registered driver %s for did:%s", type(driver).__name__, prefix)

    def method_for_did(self, did: str) -> MethodDriver:
        """Return the driver registered for a DID's method."""
        prefix = parse_did(did).prefix
        driver = self.drivers.get(prefix)
        if not driver:
            raise DIDMethodNotSupported(f"Driver for DID {did} not found.")
        return driver

    async def get(self, did: Optional[str] = None, **options) -> Any:
        """Fetch the DID document for a DID from its method driver.

        Args:
            did: DID (or DID URL) to fetch
            options: passed through to the driver's ``get``

        Returns:
            the driver's result, unmodified
        """
        if not did:
            raise EmptyDIDError("DID cannot be empty.")
        driver = self.method_for_did(did)
        LOG.debug("Fetching %s with %s", did, type(driver).__name__)
        return await driver.get(did=did, **options)

    async def generate(self, method: str, **options) -> Mapping[str, Any]:
        """Generate a new DID document with the driver for a method."""
        driver = self.drivers.get(method)
        if not driver:
            raise DIDMethodNotSupported(f'Driver for DID method "{method}" not found.')
        return await driver.generate(**options)

    async def update(
        self, did_document: Union[DIDDocument, Mapping[str, Any]], **options
    ) -> Any:
        """Commit changes to a DID document through its method driver."""
        driver = self.method_for_did(_document_id(did_document))
        return await driver.update(did_document=did_document, **options)

    async def register(
        self, did_document: Union[DIDDocument, Mapping[str, Any]], **options
    ) -> Any:
        """Register a DID document through its method driver."""
        driver = self.method_for_did(_document_id(did_document))
        return await driver.register(did_document=did_document, **options)

    async def is_resolvable(self, did: str) -> bool:
        """Check to see if a DID is resolvable."""
        if not is_valid_did(did):
            return False
        driver = self.drivers.get(parse_did(did).prefix)
        if not driver:
            return False
        check = getattr(driver, "is_resolvable", None)
        return await check(did) if check else True

    async def resolve_and_parse(self, did: str, **options) -> DIDDocument:
        """Fetch a DID document and return it as a new DIDDocument.

        The document is built fresh on every call; changing it does not
        affect what the driver returned.
        """
        return parse_document(await self.get(did=did, **options))

    async def resolve_and_dereference(self, did_url: str, **options) -> dict:
        """Resolve a DID URL and dereference the identifier.

        Returns:
            the verification method or service identified by the DID URL
        """
        if not is_valid_did_url(did_url):
            raise DIDResolutionError("Invalid DID URL; must be absolute")
        try:
            url = DIDUrl.parse(did_url)
        except InvalidDIDUrlError as e:
            raise DIDResolutionError(f"Cannot dereference {did_url}") from e

        doc = await self.resolve_and_parse(str(url.did), **options)
        candidates = [did_url]
        if url.fragment:
            candidates.append(f"#{url.fragment}")

        for candidate in candidates:
            resource = doc.find_verification_method(id=candidate) or doc.find_service(
                id=candidate
            )
            if resource:
                return resource

        raise DIDNotFound(f"{did_url} not found in DID document {doc.id}")


def parse_document(doc: Any) -> DIDDocument:
    """Build a new DIDDocument from a resolution result."""
    if isinstance(doc, DIDDocument):
        doc = doc.serialize()
    return DIDDocument.deserialize(doc)


def _document_id(did_document: Union[DIDDocument, Mapping[str, Any]]) -> str:
    if isinstance(did_document, DIDDocument):
        return did_document.id
    if isinstance(did_document, Mapping) and did_document.get("id"):
        return did_document["id"]
    raise EmptyDIDError("DID document id cannot be empty.")
