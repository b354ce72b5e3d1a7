"""Immutable data models shared by every analytics component."""
