"""Hexagonal progress palette for speedrun tracking."""
