"""Normalizer module."""

from .normalizer import INormalizer, Normalizer, resolve_origin

__all__ = ["INormalizer", "Normalizer", "resolve_origin"]
