"""Proposal engine - three-stage AI proposal generation service."""

__version__ = "1.0.0"
