"""
Treeflow — backend for the visual workflow tree builder.
"""

__version__ = "0.1.0"
