"""
Services layer for rulesmith.

Contains long-lived orchestration on top of the core indexes.
"""

from .catalog import CatalogSnapshot, RuleCatalog

__all__ = [
    "CatalogSnapshot",
    "RuleCatalog",
]
