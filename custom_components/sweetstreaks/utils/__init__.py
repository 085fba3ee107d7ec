"""Pure Python utilities for SweetStreaks.

Submodules:
    - dt_utils: Timezone resolution, local calendar days, month buckets
    - math_utils: Half-up rounding, mean scores, percentages

Usage:
    from . import dt_utils
    from .math_utils import mean_score
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
