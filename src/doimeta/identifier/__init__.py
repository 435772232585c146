"""DOI identifier normalization.

Main entry points:
- normalize: canonicalize a DOI string or URL
- is_valid: check a string normalizes to a DOI
- extract_all: find every DOI in free text
- Doi: validated value object with prefix/suffix/ISSN accessors
"""

from doimeta.identifier.doi import Doi, extract_all, is_valid, issn_from_suffix, normalize

__all__ = [
    "Doi",
    "normalize",
    "is_valid",
    "extract_all",
    "issn_from_suffix",
]
