"""
Utility functions module.

Time Semantics:
- Snapshot timestamps and trading days follow local civil time in the
  configured trading time zone (UK time by default)
- A cycle reads the UTC instant once and derives local time from it
- The host time zone is never consulted
"""
