"""
Form Translation Model Package

Extracts the translatable labels of a form schema and manages the
per-language translations attached to them.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - UI rendering
    - Remote translation services
    - Machine translation

It defines LABELS and TRANSLATIONS only.

Presentation layers consume this package through explicit store handles.
"""

__version__ = "0.1.0"
