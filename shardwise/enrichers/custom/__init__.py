"""Enricher classes.

This module contains the enrichers for the supported browsers.
"""
from .chrome import ChromeEnricher
from .firefox import FirefoxEnricher

__all__ = ["ChromeEnricher", "FirefoxEnricher"]
