"""Tracer module."""

from .tracker import ITracer, Tracer

__all__ = ["ITracer", "Tracer"]
