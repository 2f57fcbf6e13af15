"""
Householder tridiagonalization of dense symmetric/Hermitian matrices.

A = Q T Q^H with Q unitary and T real symmetric tridiagonal, computed in
place in a packed buffer. This is the preprocessing step for symmetric
eigensolvers.
"""

import logging

from .config import DEFAULT_CONFIG, ReductionConfig
from .decomposition import Tridiagonalization
from .errors import ContractViolation, NotInitializedError, TridiagonalizationError
from .householder import HouseholderSequence, householder_vector, make_householder_in_place
from .kernels import selfadjoint_lower_matvec, selfadjoint_rank_update_
from .reduction import (
    Strategy,
    TridiagonalForm,
    select_strategy,
    tridiagonalize,
    tridiagonalize_inplace,
    tridiagonalize_packed_,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ContractViolation",
    "DEFAULT_CONFIG",
    "HouseholderSequence",
    "NotInitializedError",
    "ReductionConfig",
    "Strategy",
    "TridiagonalForm",
    "Tridiagonalization",
    "TridiagonalizationError",
    "householder_vector",
    "make_householder_in_place",
    "select_strategy",
    "selfadjoint_lower_matvec",
    "selfadjoint_rank_update_",
    "tridiagonalize",
    "tridiagonalize_inplace",
    "tridiagonalize_packed_",
]
