"""
Input parsers.

This package contains the parser for desired-resource definition files.
"""

from .resources import ResourceParser

__all__ = ["ResourceParser"]
