"""Pokedex browser service: searchable Pokemon list with on-demand details."""
