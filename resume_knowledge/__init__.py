"""
Résumé knowledge retrieval and citation resolution.

Indexes résumé content into a unified lexical + vector knowledge store,
answers fused hybrid searches over it, and resolves alias citations in
generated answers back to content ids.
"""

__version__ = "0.1.0"
