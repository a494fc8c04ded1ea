"""Tests for deck resolution."""

import logging
from uuid import uuid4

import pytest

from conftest import FakeCatalogClient
from scrydeck.models.failure import (
    CatalogApiError,
    CatalogTransportError,
    ObjectNotCardError,
    ObjectNotListError,
    UnrecognisedIdentifierError,
)
from scrydeck.models.identifier import CardId, Name
from scrydeck.models.resolved_card import ResolvedCard
from scrydeck.models.scryfall import CardList, RelatedCard, ScryfallError
from scrydeck.services.deck_resolver import (
    DeckResolver,
    chunk_identifiers,
    dedupe_tokens,
)


def names(count: int) -> list[Name]:
    return [Name(f"Card {index}") for index in range(count)]


def token_part(card_id) -> dict:
    return {
        "object": "related_card",
        "id": str(card_id),
        "component": "token",
        "name": "Goblin",
        "type_line": "Token Creature — Goblin",
    }


class TestChunkIdentifiers:
    @pytest.mark.parametrize(
        ("total", "expected_sizes"),
        [
            (1, [1]),
            (75, [75]),
            (76, [38, 38]),
            (150, [75, 75]),
            (151, [51, 50, 50]),
        ],
    )
    def test_chunk_sizes(self, total: int, expected_sizes: list[int]) -> None:
        chunks = chunk_identifiers(names(total))

        assert [len(chunk) for chunk in chunks] == expected_sizes

    def test_preserves_order(self) -> None:
        identifiers = names(100)

        chunks = chunk_identifiers(identifiers)

        assert [identifier for chunk in chunks for identifier in chunk] == identifiers

    def test_empty(self) -> None:
        assert chunk_identifiers([]) == []


class TestResolve:
    async def test_empty_deck_list_makes_no_requests(self, fake_client) -> None:
        assert await DeckResolver(fake_client).resolve({}) == []
        assert fake_client.collection_calls == []

    async def test_batch_matched_counts(self, make_card) -> None:
        bolt = make_card("Lightning Bolt")
        shock = make_card("Shock")
        client = FakeCatalogClient(cards={Name("Lightning Bolt"): bolt, Name("Shock"): shock})

        resolved = await DeckResolver(client).resolve({Name("lightning bolt"): 4, Name("Shock"): 2})

        assert {(entry.card.name, entry.count) for entry in resolved} == {
            ("Lightning Bolt", 4),
            ("Shock", 2),
        }
        assert client.card_calls == []

    async def test_one_request_per_chunk(self, make_card) -> None:
        identifiers = names(151)
        client = FakeCatalogClient(
            cards={identifier: make_card(identifier.name) for identifier in identifiers}
        )

        resolved = await DeckResolver(client).resolve({identifier: 1 for identifier in identifiers})

        assert len(client.collection_calls) == 3
        assert len(resolved) == 151

    async def test_not_found_uses_fuzzy_lookup(self, make_card, caplog) -> None:
        bolt = make_card("Lightning Bolt")
        client = FakeCatalogClient(fuzzy={Name("Lightnin Bolt"): bolt})

        with caplog.at_level(logging.WARNING):
            resolved = await DeckResolver(client).resolve({Name("Lightnin Bolt"): 3})

        assert resolved == [ResolvedCard(3, bolt)]
        assert resolved[0].count == 3
        assert client.card_calls == [Name("Lightnin Bolt")]
        assert "using closest match: Lightning Bolt" in caplog.text

    async def test_fuzzy_matches_follow_batch_matches(self, make_card) -> None:
        bolt = make_card("Lightning Bolt")
        shock = make_card("Shock")
        client = FakeCatalogClient(
            cards={Name("Shock"): shock},
            fuzzy={Name("Lightnin Bolt"): bolt},
        )

        resolved = await DeckResolver(client).resolve({Name("Lightnin Bolt"): 1, Name("Shock"): 1})

        assert [entry.card for entry in resolved] == [shock, bolt]

    async def test_each_identifier_resolved_once(self, make_card) -> None:
        identifiers = names(100)
        found = {identifier: make_card(identifier.name) for identifier in identifiers[::2]}
        fuzzy = {identifier: make_card(identifier.name) for identifier in identifiers[1::2]}
        client = FakeCatalogClient(cards=found, fuzzy=fuzzy)

        resolved = await DeckResolver(client).resolve({identifier: 2 for identifier in identifiers})

        # Misses come from both chunks
        assert len(client.collection_calls) == 2
        assert len(client.card_calls) == 50
        assert set(client.card_calls) == set(fuzzy)
        assert len(resolved) == 100
        assert {entry.card.name for entry in resolved} == {
            identifier.name for identifier in identifiers
        }
        assert all(entry.count == 2 for entry in resolved)


class TestTokens:
    async def test_tokens_fetched_once_and_deduplicated(self, make_card) -> None:
        oracle_id = uuid4()
        first_token = make_card("Goblin", type_line="Token Creature — Goblin", oracle_id=oracle_id)
        reprint = make_card("Goblin", type_line="Token Creature — Goblin", oracle_id=oracle_id)
        krenko = make_card("Krenko, Mob Boss", all_parts=[token_part(first_token.id)])
        rabblemaster = make_card("Goblin Rabblemaster", all_parts=[token_part(reprint.id)])
        client = FakeCatalogClient(
            cards={
                Name("Krenko, Mob Boss"): krenko,
                Name("Goblin Rabblemaster"): rabblemaster,
                CardId(first_token.id): first_token,
                CardId(reprint.id): reprint,
            }
        )

        resolved = await DeckResolver(client).resolve(
            {Name("Krenko, Mob Boss"): 1, Name("Goblin Rabblemaster"): 4},
            fetch_related_tokens=True,
        )

        tokens = [entry for entry in resolved if entry.card.is_token]
        assert len(tokens) == 1
        assert tokens[0].count == 1
        assert len(client.collection_calls) == 2
        assert set(client.collection_calls[1]) == {CardId(first_token.id), CardId(reprint.id)}

    async def test_fuzzy_matched_card_contributes_tokens(self, make_card) -> None:
        goblin = make_card("Goblin", type_line="Token Creature — Goblin")
        krenko = make_card("Krenko, Mob Boss", all_parts=[token_part(goblin.id)])
        client = FakeCatalogClient(
            cards={CardId(goblin.id): goblin},
            fuzzy={Name("Krenko Mob"): krenko},
        )

        resolved = await DeckResolver(client).resolve({Name("Krenko Mob"): 2}, True)

        assert [(entry.count, entry.card) for entry in resolved] == [(2, krenko), (1, goblin)]
        assert client.card_calls == [Name("Krenko Mob")]
        assert client.collection_calls == [[Name("Krenko Mob")], [CardId(goblin.id)]]

    async def test_tokens_not_fetched_by_default(self, make_card) -> None:
        krenko = make_card("Krenko, Mob Boss", all_parts=[token_part(uuid4())])
        client = FakeCatalogClient(cards={Name("Krenko, Mob Boss"): krenko})

        resolved = await DeckResolver(client).resolve({Name("Krenko, Mob Boss"): 1})

        assert len(resolved) == 1
        assert len(client.collection_calls) == 1

    async def test_no_related_tokens_skips_token_pass(self, lightning_bolt) -> None:
        client = FakeCatalogClient(cards={Name("Lightning Bolt"): lightning_bolt})

        await DeckResolver(client).resolve({Name("Lightning Bolt"): 4}, fetch_related_tokens=True)

        assert len(client.collection_calls) == 1

    async def test_non_token_parts_ignored(self, make_card) -> None:
        meld = {**token_part(uuid4()), "component": "meld_part", "type_line": "Creature"}
        bruna = make_card("Bruna, the Fading Light", all_parts=[meld])
        client = FakeCatalogClient(cards={Name("Bruna, the Fading Light"): bruna})

        await DeckResolver(client).resolve({Name("Bruna, the Fading Light"): 1}, True)

        assert len(client.collection_calls) == 1

    def test_dedupe_drops_tokens_without_oracle_id(self, make_card, caplog) -> None:
        orphan = make_card("Mystery Token", type_line="Token", oracle_id=None)

        with caplog.at_level(logging.WARNING):
            assert dedupe_tokens([ResolvedCard(1, orphan)]) == []

        assert "has no oracle ID" in caplog.text

    def test_dedupe_keeps_first_occurrence(self, make_card) -> None:
        oracle_id = uuid4()
        first = make_card("Goblin", type_line="Token", oracle_id=oracle_id)
        second = make_card("Goblin", type_line="Token", oracle_id=oracle_id)

        deduped = dedupe_tokens([ResolvedCard(1, first), ResolvedCard(1, second)])

        assert [entry.card for entry in deduped] == [first]

    def test_related_part_classification(self) -> None:
        part = RelatedCard.model_validate(token_part(uuid4()))

        assert part.is_token


class TestErrors:
    async def test_first_chunk_error_propagates(self) -> None:
        client = FakeCatalogClient()
        client.collection_errors[0] = CatalogTransportError("first")
        client.collection_errors[1] = CatalogTransportError("second")

        with pytest.raises(CatalogTransportError, match="first"):
            await DeckResolver(client).resolve({identifier: 1 for identifier in names(100)})

        # Every chunk was still requested
        assert len(client.collection_calls) == 2

    async def test_catalog_error_object(self) -> None:
        client = FakeCatalogClient()
        error = ScryfallError(status=400, code="bad_request", details="Too many identifiers")
        client.collection_errors[0] = CatalogApiError(error)

        with pytest.raises(CatalogApiError) as exc_info:
            await DeckResolver(client).resolve({Name("Lightning Bolt"): 1})

        assert exc_info.value.error.code == "bad_request"

    async def test_non_list_response(self, lightning_bolt) -> None:
        client = FakeCatalogClient()
        client.collection_overrides[0] = lightning_bolt

        with pytest.raises(ObjectNotListError):
            await DeckResolver(client).resolve({Name("Lightning Bolt"): 1})

    async def test_non_card_in_list(self) -> None:
        client = FakeCatalogClient()
        client.collection_overrides[0] = CardList(
            data=[RelatedCard.model_validate(token_part(uuid4()))]
        )

        with pytest.raises(ObjectNotCardError):
            await DeckResolver(client).resolve({Name("Lightning Bolt"): 1})

    async def test_fuzzy_lookup_returning_non_card(self) -> None:
        client = FakeCatalogClient(fuzzy={Name("Bolt"): CardList()})

        with pytest.raises(ObjectNotCardError):
            await DeckResolver(client).resolve({Name("Bolt"): 1})

    async def test_unrecognised_not_found_entry(self) -> None:
        client = FakeCatalogClient()
        client.collection_overrides[0] = CardList(not_found=[{"arena_id": 1}])

        with pytest.raises(UnrecognisedIdentifierError) as exc_info:
            await DeckResolver(client).resolve({Name("Lightning Bolt"): 1})

        assert exc_info.value.status_code == 502
        assert client.card_calls == []


class TestFuzzyResolve:
    async def test_missing_count_defaults_to_one(self, lightning_bolt, caplog) -> None:
        client = FakeCatalogClient(fuzzy={Name("Bolt"): lightning_bolt})

        with caplog.at_level(logging.WARNING):
            resolved = await DeckResolver(client).fuzzy_resolve({}, Name("Bolt"))

        assert resolved.count == 1
        assert "assuming it has one copy" in caplog.text
