"""Shared helpers for Paleta."""
