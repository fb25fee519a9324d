"""Switchboard - tool-calling agents with multi-agent delegation."""

__version__ = "0.3.0"
