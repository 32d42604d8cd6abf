"""
Core retrieval engine.

The `Retriever` resolves each input URL, downloads files through the
confirmation dance Drive requires, and mirrors folder trees.
"""

from .retriever import Retriever

__all__ = ["Retriever"]
