"""Semantic type aliases for compile-time type safety.

NewType keeps node ids and field ids distinct for mypy even though both
are plain strings on the wire.
"""

from typing import NewType

NodeID = NewType("NodeID", str)
"""Canvas node identifier (e.g., 'text_3' for field nodes, 'a1B2c3D4' for structural)"""

FieldID = NewType("FieldID", str)
"""Field identifier, formatted '<typePrefix>_<n>' (e.g., 'email_2')"""

EdgeID = NewType("EdgeID", str)
"""Edge identifier (e.g., 'e_text_1_text_2'); not required to be meaningful"""
