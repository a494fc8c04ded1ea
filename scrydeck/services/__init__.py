"""
scrydeck services.

Deck resolution, diffing and the Scryfall catalog client. Import from the
individual modules; the models package depends on token_handling, so this
package does not re-export anything.
"""
