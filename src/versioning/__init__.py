"""
Versioning: one annotated declaration, many per-version copies.

Given a declaration tree whose nodes carry `version(...)` filter annotations
and an ordered list of version names, the engine produces one independently
filtered copy of the declaration per version.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Surface-syntax tokenizing of the declarations themselves
    - Rendering variants back to source text
    - Host build-system or macro-expansion integration

It only tokenizes its two mini-languages: version lists and filters.
Every operation is a pure function of (tree, registry, options).
"""

__version__ = "0.1.0"
