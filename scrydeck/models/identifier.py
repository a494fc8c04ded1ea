"""
Card identifiers.

The closed set of ways a decklist can name a card. Each variant maps onto
one identifier form accepted by Scryfall's /cards/collection endpoint.

INVARIANTS:
- Name, NameSet and CollectorNumberSet compare case-insensitively on every
  string field (they are typed by users)
- Identifiers of different variants are never equal
- OracleId and IllustrationId are valid match keys but cannot select a
  single printing
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from scrydeck.models.failure import UnrecognisedIdentifierError


class CardIdentifier:
    """Base of all card identifier variants."""

    __slots__ = ()

    supports_direct_lookup = True

    def to_payload(self) -> dict[str, Any]:
        """JSON object understood by the /cards/collection endpoint."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class CardId(CardIdentifier):
    """Scryfall's own id of a specific printing."""

    id: UUID

    def to_payload(self) -> dict[str, Any]:
        return {"id": str(self.id)}

    def __str__(self) -> str:
        return f"Id({self.id})"


@dataclass(frozen=True, slots=True)
class MtgoId(CardIdentifier):
    mtgo_id: int

    def to_payload(self) -> dict[str, Any]:
        return {"mtgo_id": self.mtgo_id}

    def __str__(self) -> str:
        return f"MtgoId({self.mtgo_id})"


@dataclass(frozen=True, slots=True)
class MultiverseId(CardIdentifier):
    multiverse_id: int

    def to_payload(self) -> dict[str, Any]:
        return {"multiverse_id": self.multiverse_id}

    def __str__(self) -> str:
        return f"MultiverseId({self.multiverse_id})"


@dataclass(frozen=True, slots=True)
class OracleId(CardIdentifier):
    """Shared by every printing of the same card; not a printing selector."""

    oracle_id: UUID

    supports_direct_lookup = False

    def to_payload(self) -> dict[str, Any]:
        return {"oracle_id": str(self.oracle_id)}

    def __str__(self) -> str:
        return f"OracleId({self.oracle_id})"


@dataclass(frozen=True, slots=True)
class IllustrationId(CardIdentifier):
    """Shared by every printing using the same artwork; not a printing selector."""

    illustration_id: UUID

    supports_direct_lookup = False

    def to_payload(self) -> dict[str, Any]:
        return {"illustration_id": str(self.illustration_id)}

    def __str__(self) -> str:
        return f"IllustrationId({self.illustration_id})"


@dataclass(frozen=True, slots=True, eq=False)
class Name(CardIdentifier):
    name: str

    def _key(self) -> str:
        return self.name.casefold()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((Name, self._key()))

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name}

    def __str__(self) -> str:
        return f"Name({self.name})"


@dataclass(frozen=True, slots=True, eq=False)
class NameSet(CardIdentifier):
    name: str
    set_code: str

    def _key(self) -> tuple[str, str]:
        return (self.name.casefold(), self.set_code.casefold())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NameSet):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((NameSet, self._key()))

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name, "set": self.set_code}

    def __str__(self) -> str:
        return f"NameSet({self.name}, {self.set_code})"


@dataclass(frozen=True, slots=True, eq=False)
class CollectorNumberSet(CardIdentifier):
    collector_number: str
    set_code: str

    def _key(self) -> tuple[str, str]:
        return (self.collector_number.casefold(), self.set_code.casefold())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CollectorNumberSet):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((CollectorNumberSet, self._key()))

    def to_payload(self) -> dict[str, Any]:
        return {"collector_number": self.collector_number, "set": self.set_code}

    def __str__(self) -> str:
        return f"CollectorNumberSet({self.collector_number}, {self.set_code})"


# Requested copy count per identifier, as produced by a decklist parser
DeckList = dict[CardIdentifier, int]


def identifier_from_payload(payload: dict[str, Any]) -> CardIdentifier:
    """
    Rebuild an identifier from its /cards/collection JSON form.

    Used to read the `not_found` list of a collection response.

    Raises:
        UnrecognisedIdentifierError: If the payload matches no identifier form
    """
    if "id" in payload:
        return CardId(UUID(str(payload["id"])))
    if "mtgo_id" in payload:
        return MtgoId(int(payload["mtgo_id"]))
    if "multiverse_id" in payload:
        return MultiverseId(int(payload["multiverse_id"]))
    if "oracle_id" in payload:
        return OracleId(UUID(str(payload["oracle_id"])))
    if "illustration_id" in payload:
        return IllustrationId(UUID(str(payload["illustration_id"])))
    if "collector_number" in payload and "set" in payload:
        return CollectorNumberSet(str(payload["collector_number"]), str(payload["set"]))
    if "name" in payload and "set" in payload:
        return NameSet(str(payload["name"]), str(payload["set"]))
    if "name" in payload:
        return Name(str(payload["name"]))

    raise UnrecognisedIdentifierError(payload)
