"""
Core Models Package

Immutable, validated data models passed between pipeline stages.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses. This ensures:
1. No accidental mutation between load, order and composite
2. Safe to pass between loader threads
3. Geometry invariants are checked once, at construction

| Model | Created By | Consumed By |
|-------|------------|-------------|
| `PageSource` | caller / rendering | loader |
| `PageImage` | loader | ordering, compositor |
| `OrderedPageSet` | ordering | compositor |
| `CanvasLayout` | compositor | compositor render, pipeline |
| `EncodingAttempt` | optimizer | finalizer |
| `StitchResult` | finalizer | caller |
"""

from .pages import TRAILER_NAME, PageSource, PageImage, OrderedPageSet
from .canvas import CanvasSpec, Placement, CanvasLayout
from .encoding import EncodingAttempt, QualitySearch, StitchResult

__all__ = [
    "TRAILER_NAME",
    "PageSource",
    "PageImage",
    "OrderedPageSet",
    "CanvasSpec",
    "Placement",
    "CanvasLayout",
    "EncodingAttempt",
    "QualitySearch",
    "StitchResult",
]
