"""Bundled starter decks."""
