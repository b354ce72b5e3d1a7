"""Swing point detection and support/resistance levels."""
