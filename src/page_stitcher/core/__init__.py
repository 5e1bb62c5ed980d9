"""
Page Stitcher Core Package

Shared data models and the error taxonomy used by every stage of the
stitching pipeline. These models are the single source of truth for
page geometry and encoding results.

**DESIGN RULES:**

1. **Immutable Data Models**
   - Every model is a frozen dataclass; stages build new instances
     instead of mutating what they were given.

2. **Calculated Geometry (Never Stored Twice)**
   - Canvas width/height and placement offsets are derived from the
     ordered pages in one pass and never edited afterwards.

3. **Typed Failures**
   - Every fatal condition is a `StitchError` subclass carrying the
     location, quality or byte size needed for diagnostics.
"""

from .errors import (
    StitchError,
    NotFoundError,
    DecodeError,
    CompositionError,
    PersistError,
)
from .models import (
    TRAILER_NAME,
    PageSource,
    PageImage,
    OrderedPageSet,
    CanvasSpec,
    Placement,
    CanvasLayout,
    EncodingAttempt,
    QualitySearch,
    StitchResult,
)

__all__ = [
    # Errors
    "StitchError",
    "NotFoundError",
    "DecodeError",
    "CompositionError",
    "PersistError",
    # Models
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
