"""
Header-to-column mapping for report files.
"""

from .header_mapper import HeaderMapper

__all__ = [
    "HeaderMapper",
]
