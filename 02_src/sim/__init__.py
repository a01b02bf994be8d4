"""Beacon simulator for local development."""

from .sim import DEFAULT_SCENARIO, ISim, Sim

__all__ = ["DEFAULT_SCENARIO", "ISim", "Sim"]
