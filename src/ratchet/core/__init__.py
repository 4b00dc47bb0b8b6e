from .compare import (
    compare,
    compare_measures,
    resolve_exclusions,
)
