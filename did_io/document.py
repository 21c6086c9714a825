"""DID Document model."""

from typing import Any, Dict, List, Mapping, Optional, Union

from did_io.crypto import CryptoProvider, KeyPair
from did_io.relationships import VerificationRelationship

VerificationMethodRef = Union[str, Dict[str, Any]]
Purpose = Union[str, VerificationRelationship]

# JSON member name -> attribute name
FIELDS: Dict[str, str] = {
    "controller": "controller",
    "verificationMethod": "verification_method",
    **{rel.value: rel.attribute for rel in VerificationRelationship},
    "service": "service",
}


class DIDDocumentError(Exception):
    """Represents an error from a DID document operation."""


class MissingIdError(DIDDocumentError):
    """Raised when a DID document is constructed without an id."""


class UnsupportedPurpose(DIDDocumentError):
    """Raised for a proof purpose that is not a verification relationship."""


class MissingCryptoProvider(DIDDocumentError):
    """Raised when keys must be generated but no crypto provider was given."""


class DuplicateService(DIDDocumentError):
    """Raised when adding a service whose id is already in the document."""


def _relationship(purpose: Purpose) -> VerificationRelationship:
    try:
        return VerificationRelationship(purpose)
    except ValueError:
        raise UnsupportedPurpose(f'Unsupported key purpose: "{purpose}".')


class DIDDocument:
    """In-memory DID document.

    Members are assigned as given; lists and verification method objects are
    shared with the caller, not copied; ``deserialize`` copies member lists.
    Members that are not part of the verification model (``@context``,
    ``alsoKnownAs`` and so on) are kept in ``extra`` and written back on
    serialization.
    """

    def __init__(self, id: Optional[str] = None, **fields):
        """Initialize the document."""
        if not id:
            raise MissingIdError("Id is required.")
        self._id = id

        self.controller: Optional[Union[str, List[str]]] = None
        self.verification_method: Optional[List[Dict[str, Any]]] = None
        self.authentication: Optional[List[VerificationMethodRef]] = None
        self.assertion_method: Optional[List[VerificationMethodRef]] = None
        self.key_agreement: Optional[List[VerificationMethodRef]] = None
        self.capability_invocation: Optional[List[VerificationMethodRef]] = None
        self.capability_delegation: Optional[List[VerificationMethodRef]] = None
        self.service: Optional[List[Dict[str, Any]]] = None
        self.extra: Dict[str, Any] = {}

        attributes = set(FIELDS.values())
        for name, value in fields.items():
            if name in FIELDS:
                setattr(self, FIELDS[name], value)
            elif name in attributes:
                setattr(self, name, value)
            else:
                self.extra[name] = value

    @property
    def id(self) -> str:
        """Return the DID this document describes."""
        return self._id

    def __repr__(self) -> str:
        """Return a short representation of the document."""
        return f"{type(self).__name__}(id={self._id!r})"

    @classmethod
    def deserialize(cls, value: Mapping[str, Any]) -> "DIDDocument":
        """Create a document from its JSON representation.

        Member lists are copied, so adding or removing methods and services
        leaves ``value`` untouched.
        """
        fields = {}
        for name, member in value.items():
            if name in FIELDS and isinstance(member, list):
                member = list(member)
            fields[name] = member
        return cls(**fields)

    def serialize(self) -> Dict[str, Any]:
        """Return the JSON representation of this document."""
        doc: Dict[str, Any] = dict(self.extra)
        doc["id"] = self._id
        for name, attribute in FIELDS.items():
            value = getattr(self, attribute)
            if value is not None:
                doc[name] = value
        return doc

    def get_all_verification_methods(
        self, purpose: Purpose
    ) -> Optional[List[VerificationMethodRef]]:
        """Return the methods listed under a proof purpose."""
        return getattr(self, _relationship(purpose).attribute)

    def find_verification_method(
        self, id: Optional[str] = None, purpose: Optional[Purpose] = None
    ) -> Optional[Dict[str, Any]]:
        """Find a verification method by id or by proof purpose.

        By id, ``verificationMethod`` is searched first, then each proof
        purpose in order; only methods defined inline are returned, never
        bare references. By purpose, the first method listed for that
        purpose is returned, dereferenced if it is given by reference.

        Returns:
            the verification method, or None if not found
        """
        if not (id or purpose):
            raise ValueError("A method id or purpose is required.")

        if id:
            return self._method_by_id(id)

        method = next(iter(self.get_all_verification_methods(purpose) or []), None)
        if isinstance(method, str):
            return self._method_by_id(method)
        return method

    def approves_method_for(self, method_id: str, purpose: Purpose) -> bool:
        """Test whether a method is authorized for a proof purpose.

        A method merely defined under ``verificationMethod`` is not approved
        for any purpose; it must be listed (inline or by reference) under the
        requested one.
        """
        if not (method_id and purpose):
            raise ValueError("A method id and purpose is required.")

        methods = self.get_all_verification_methods(purpose) or []
        if not self._method_by_id(method_id):
            return False

        return any(
            (isinstance(method, str) and method == method_id)
            or (isinstance(method, Mapping) and method.get("id") == method_id)
            for method in methods
        )

    def _method_by_id(self, method_id: str) -> Optional[Dict[str, Any]]:
        for method in self.verification_method or []:
            if isinstance(method, Mapping) and method.get("id") == method_id:
                return method

        for relationship in VerificationRelationship:
            for method in getattr(self, relationship.attribute) or []:
                if isinstance(method, Mapping) and method.get("id") == method_id:
                    return method

        return None

    async def init_keys(
        self,
        crypto: Optional[CryptoProvider] = None,
        key_map: Optional[Mapping[Purpose, Union[str, KeyPair]]] = None,
    ) -> Dict[str, Dict[str, KeyPair]]:
        """Place key material into the document, by proof purpose.

        Example::

            key_pairs = (await doc.init_keys(
                crypto=provider,
                key_map={
                    "capabilityInvocation": existing_key,
                    "authentication": "Ed25519VerificationKey2020",
                    "keyAgreement": "X25519KeyAgreementKey2020",
                },
            ))["key_pairs"]

        Args:
            crypto: provider used to generate keys given by type name
            key_map: key pairs, or key type names to generate, by purpose

        Returns:
            a mapping with ``key_pairs``, the key pairs by key id
        """
        key_pairs: Dict[str, KeyPair] = {}

        for purpose, entry in (key_map or {}).items():
            relationship = _relationship(purpose)

            if isinstance(entry, str):
                if not crypto:
                    raise MissingCryptoProvider(
                        "Please provide a crypto provider to generate keys."
                    )
                key = await crypto.generate(type=entry, controller=self._id)
            else:
                key = entry

            setattr(self, relationship.attribute, [key.export(public_key=True)])
            key_pairs[key.id] = key

        return {"key_pairs": key_pairs}

    def add_verification_method(
        self, method: Dict[str, Any], purpose: Optional[Purpose] = None
    ):
        """Add a verification method, under a proof purpose if given."""
        attribute = (
            _relationship(purpose).attribute if purpose else "verification_method"
        )
        methods = getattr(self, attribute)
        if methods is None:
            methods = []
            setattr(self, attribute, methods)
        methods.append(method)

    def remove_verification_method(self, id: str):
        """Remove a verification method and every reference to it."""
        attributes = [rel.attribute for rel in VerificationRelationship]
        for attribute in ("verification_method", *attributes):
            methods = getattr(self, attribute)
            if not methods:
                continue
            setattr(
                self,
                attribute,
                [
                    method
                    for method in methods
                    if method != id
                    and not (isinstance(method, Mapping) and method.get("id") == id)
                ],
            )

    def service_id_for(self, fragment: str) -> str:
        """Compose a service id from a fragment."""
        if not fragment:
            raise ValueError("Invalid service fragment.")
        return f"{self._id}#{fragment}"

    def _service_id(self, id: Optional[str], fragment: Optional[str]):
        if id and fragment:
            raise ValueError("Pass either a service id or a fragment, not both.")
        return self.service_id_for(fragment) if fragment else id

    def find_service(
        self,
        id: Optional[str] = None,
        type: Optional[str] = None,
        fragment: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Find the first service matching an id (or fragment) or a type."""
        id = self._service_id(id, fragment)
        if not (id or type):
            raise ValueError("A service id, fragment or type is required.")

        for service in self.service or []:
            if id and service.get("id") == id:
                return service
            if not id and service.get("type") == type:
                return service
        return None

    def has_service(
        self,
        id: Optional[str] = None,
        type: Optional[str] = None,
        fragment: Optional[str] = None,
    ) -> bool:
        """Test whether a service with the given id, fragment or type exists."""
        return self.find_service(id=id, type=type, fragment=fragment) is not None

    def add_service(
        self,
        id: Optional[str] = None,
        type: Optional[str] = None,
        endpoint: Optional[str] = None,
        fragment: Optional[str] = None,
    ):
        """Add a service endpoint to this document.

        The service id is given whole as ``id``, or as a ``fragment`` of
        this document's DID.
        """
        id = self._service_id(id, fragment)
        if not (id and type and endpoint):
            raise ValueError("Service id, type, and endpoint are required.")
        if self.find_service(id=id):
            raise DuplicateService(f"Service with id {id} already exists.")

        if self.service is None:
            self.service = []
        self.service.append({"id": id, "type": type, "serviceEndpoint": endpoint})

    def remove_service(self, id: Optional[str] = None, fragment: Optional[str] = None):
        """Remove a service endpoint; removing an unknown id does nothing."""
        id = self._service_id(id, fragment)
        if not id:
            raise ValueError("A service id or fragment is required.")
        if not self.service:
            return
        services = [service for service in self.service if service.get("id") != id]
        self.service = services or None
