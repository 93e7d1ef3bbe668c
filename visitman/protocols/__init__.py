"""Visitman protocols."""

from visitman.protocols.store import EventStore

__all__ = ["EventStore"]
