"""Typed health record items with a fixed-shape XML codec.

Every item type validates its fields on set, parses its XML fragment,
writes the same shape back and describes itself in one line.
"""

__version__ = "0.1.0"
