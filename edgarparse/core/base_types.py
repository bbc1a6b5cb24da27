"""
Shared type aliases and type definitions for edgarparse.

Centralizes commonly used types for consistency across modules.
"""

from datetime import date, datetime
from typing import Literal, NewType, TypeAlias

# Full-text index form type, e.g. "10-K"; any type can be retained
FormType: TypeAlias = str

# Period types for XBRL contexts
PeriodType: TypeAlias = Literal["instant", "duration", "forever"]

# CIK is stored as an int and rendered as a 10-digit zero-padded string
CIK: TypeAlias = int

# Accession number format: XXXXXXXXXX-YY-NNNNNN
AccessionNumber: TypeAlias = str

# Declared widths for integer record fields
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)

# Date types
DateLike: TypeAlias = date | datetime | str
