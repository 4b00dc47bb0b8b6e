from .measure import (
    CommitMeasure,
    InputType,
    Measure,
    sort_measures,
)

from .exclusion import Exclusion

from .events import (
    Comparison,
    EventKind,
    MeasureEvent,
)
