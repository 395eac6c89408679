"""Paleta service layer: color extraction, harmony and observability."""
