"""Test helper utilities for jobscout tests."""

from .fixture_adapter import StaticAdapter, StaticAdapterFactory, make_scraped_job

__all__ = ["StaticAdapter", "StaticAdapterFactory", "make_scraped_job"]
