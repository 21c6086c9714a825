"""MultiBase decoding for multikey values."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar

import base58


class MultibaseDecoder(ABC):
    """Decoder for one multibase encoding."""

    character: ClassVar[str]

    @abstractmethod
    def decode(self, value: str) -> bytes:
        """Decode a string, without its multibase prefix."""


class Base58BtcDecoder(MultibaseDecoder):
    """Base58BTC decoding."""

    character = "z"

    def decode(self, value: str) -> bytes:
        """Decode a base58btc encoded string."""
        return base58.b58decode(value)


class Encoding(Enum):
    """Multibase encodings accepted in multikeys."""

    base58btc = Base58BtcDecoder()

    @classmethod
    def from_character(cls, character: str) -> MultibaseDecoder:
        """Get the decoder for a multibase prefix character."""
        for encoding in cls:
            if encoding.value.character == character:
                return encoding.value
        raise ValueError(f"Unsupported multibase prefix: {character}")


def decode(value: str) -> bytes:
    """Decode a multibase encoded string.

    Raises:
        ValueError: for an empty value, unknown prefix or invalid characters
    """
    if not value:
        raise ValueError("Cannot decode an empty multibase value")
    decoder = Encoding.from_character(value[0])
    return decoder.decode(value[1:])
