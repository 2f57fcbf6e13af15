"""
Reduction Configuration

Centralized knobs for the size dispatcher.

Usage:
    from tridiagonalization.config import ReductionConfig

    cfg = ReductionConfig(negligible_tolerance=1e-10)
    tridiagonalize_inplace(a, d, e, config=cfg)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class ReductionConfig:
    """Configuration for the order-1/order-3/general dispatch."""

    # Threshold for |A(2,0)|^2 in the order-3 closed form; at or below it
    # the input is taken as already tridiagonal. None uses the smallest
    # normal number of the scalar precision.
    negligible_tolerance: Optional[float] = None

    # When False every order goes through the general reduction.
    fixed_size_paths: bool = True

    def tolerance_for(self, dtype) -> float:
        if self.negligible_tolerance is not None:
            return float(self.negligible_tolerance)
        # finfo of a complex dtype describes its real component.
        return float(np.finfo(np.dtype(dtype)).tiny)


DEFAULT_CONFIG = ReductionConfig()
