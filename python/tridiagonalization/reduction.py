"""reduction

In-place Householder reduction of a dense symmetric/Hermitian matrix to real
symmetric tridiagonal form, A = Q T Q^H.

Packed storage (lower)
----------------------
After ``tridiagonalize_packed_`` the n-by-n buffer holds

    buffer[i, i]           T[i, i]              (real part)
    buffer[i+1, i]         T[i+1, i]            (real part)
    buffer[i+2:, i]        essential part of the i-th reflector vector
    strict upper triangle  untouched input

and ``coeffs[i]`` holds the i-th reflector coefficient h_i. The reduction
applies P_i = I - h_i v_i v_i^H (acting on rows/cols i+1..n-1) as
A <- P_i A P_i^H, so Q = P_0^H P_1^H ... P_{n-2}^H.

Dispatch
--------
``tridiagonalize_inplace`` picks one of three strategies from the order and
scalar type of the matrix: a trivial order-1 path, a closed form for real
3-by-3 matrices, and the general packed reduction. All strategies share the
signature ``(matrix, diag, subdiag, extract_q, config)``.

State transition of the buffer in the general path:
raw input -> packed tridiagonal -> (extract_q only) explicit Q.
The last step is destructive; the packed reflectors are gone afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Optional

import numpy as np

from .config import DEFAULT_CONFIG, ReductionConfig
from .errors import ContractViolation
from .householder import HouseholderSequence, make_householder_in_place
from .kernels import selfadjoint_lower_matvec, selfadjoint_rank_update_

logger = logging.getLogger(__name__)


def _check_square(matrix: np.ndarray, operation: str) -> int:
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ContractViolation(operation, f"matrix must be square, got shape {matrix.shape}")
    n = matrix.shape[0]
    if n == 0:
        raise ContractViolation(operation, "matrix must have order >= 1")
    return n


def _check_inexact(matrix: np.ndarray, operation: str) -> None:
    if not np.issubdtype(matrix.dtype, np.inexact):
        raise ContractViolation(operation, f"matrix must have a floating or complex dtype, got {matrix.dtype}")


def _check_length(vec: np.ndarray, expected: int, name: str, operation: str) -> None:
    if vec.ndim != 1 or vec.shape[0] != expected:
        raise ContractViolation(operation, f"{name} must have shape ({expected},), got {vec.shape}")


def packed_q(matrix: np.ndarray, coeffs: np.ndarray) -> HouseholderSequence:
    """Q of a packed reduction as an unevaluated reflector sequence."""
    return HouseholderSequence(matrix, coeffs, conjugate=True, shift=1)


# -----------------------------------------------------------------------------
# General packed reduction
# -----------------------------------------------------------------------------


def tridiagonalize_packed_(matrix: np.ndarray, coeffs: np.ndarray) -> None:
    """Reduce the Hermitian matrix in the lower triangle of ``matrix`` in place.

    ``matrix`` must be n-by-n and ``coeffs`` have length n-1. Only the lower
    triangle (with the diagonal) is read or written. See the module docstring
    for the packed layout on return.

    After iteration i the leading (i+1)-by-(i+1) block is final; only the
    trailing block matrix[i+1:, i+1:] remains to be reduced.
    """
    n = _check_square(matrix, "tridiagonalize_packed_")
    _check_inexact(matrix, "tridiagonalize_packed_")
    _check_length(coeffs, n - 1, "coeffs", "tridiagonalize_packed_")

    for i in range(n - 1):
        column = matrix[i + 1 :, i]
        trailing = matrix[i + 1 :, i + 1 :]

        h, beta = make_householder_in_place(column)
        column[0] = 1

        # p = conj(h) S v, then p -= conj(h)/2 (p^H v) v so that
        # S - v p^H - p v^H equals P S P^H.
        p = np.conj(h) * selfadjoint_lower_matvec(trailing, column)
        p += (np.conj(h) * -0.5 * np.vdot(p, column)) * column
        selfadjoint_rank_update_(trailing, column, p, -1)

        column[0] = beta
        coeffs[i] = h


# -----------------------------------------------------------------------------
# Strategies
# -----------------------------------------------------------------------------


class Strategy(IntEnum):
    """Reduction paths selectable by order and scalar type."""

    GENERAL = 0
    ORDER_ONE = 1
    ORDER_THREE = 3


def _reduce_general(
    matrix: np.ndarray,
    diag: np.ndarray,
    subdiag: np.ndarray,
    extract_q: bool,
    config: ReductionConfig,
) -> None:
    n = matrix.shape[0]
    coeffs = np.zeros(n - 1, dtype=matrix.dtype)
    tridiagonalize_packed_(matrix, coeffs)
    diag[...] = matrix.diagonal().real
    subdiag[...] = np.diagonal(matrix, offset=-1).real
    if extract_q:
        matrix[...] = packed_q(matrix.copy(), coeffs).materialize()


def _reduce_order_one(
    matrix: np.ndarray,
    diag: np.ndarray,
    subdiag: np.ndarray,
    extract_q: bool,
    config: ReductionConfig,
) -> None:
    diag[0] = np.real(matrix[0, 0])
    if extract_q:
        matrix[0, 0] = 1


def _reduce_order_three(
    matrix: np.ndarray,
    diag: np.ndarray,
    subdiag: np.ndarray,
    extract_q: bool,
    config: ReductionConfig,
) -> None:
    """Closed form for a real symmetric 3-by-3 matrix (lower triangle read).

    A single reflector acting on rows/cols 1..2 maps [A10, A20] to
    [beta, 0]; it is written out explicitly as [[m01, m02], [m02, -m01]].
    """
    a = matrix
    diag[0] = np.real(a[0, 0])
    v1norm2 = float(abs(a[2, 0]) ** 2)

    if v1norm2 <= config.tolerance_for(a.dtype):
        logger.debug("order-3 path: |A(2,0)|^2=%.3e negligible, already tridiagonal", v1norm2)
        diag[1] = np.real(a[1, 1])
        diag[2] = np.real(a[2, 2])
        subdiag[0] = np.real(a[1, 0])
        subdiag[1] = np.real(a[2, 1])
        if extract_q:
            a[...] = np.eye(3, dtype=a.dtype)
        return

    beta = np.sqrt(abs(a[1, 0]) ** 2 + v1norm2)
    inv_beta = 1.0 / beta
    m01 = np.conj(a[1, 0]) * inv_beta
    m02 = np.conj(a[2, 0]) * inv_beta
    q = 2.0 * m01 * np.conj(a[2, 1]) + m02 * (a[2, 2] - a[1, 1])
    diag[1] = np.real(a[1, 1] + m02 * q)
    diag[2] = np.real(a[2, 2] - m02 * q)
    subdiag[0] = beta
    subdiag[1] = np.real(np.conj(a[2, 1]) - m01 * q)
    if extract_q:
        a[...] = np.array(
            [[1, 0, 0],
             [0, m01, m02],
             [0, m02, -m01]],
            dtype=a.dtype,
        )


_STRATEGIES: Dict[Strategy, Callable[..., None]] = {
    Strategy.GENERAL: _reduce_general,
    Strategy.ORDER_ONE: _reduce_order_one,
    Strategy.ORDER_THREE: _reduce_order_three,
}


def select_strategy(n: int, dtype, config: ReductionConfig = DEFAULT_CONFIG) -> Strategy:
    """Pick the reduction path for an order-n matrix of the given dtype."""
    if not config.fixed_size_paths:
        return Strategy.GENERAL
    if n == 1:
        return Strategy.ORDER_ONE
    # The explicit 2x2 reflector block is only unitary for real scalars.
    if n == 3 and not np.issubdtype(np.dtype(dtype), np.complexfloating):
        return Strategy.ORDER_THREE
    return Strategy.GENERAL


def _check_forced_strategy(strategy: Strategy, n: int, dtype) -> None:
    if strategy == Strategy.ORDER_ONE and n != 1:
        raise ContractViolation("tridiagonalize_inplace", f"order-1 path requested for n={n}")
    if strategy == Strategy.ORDER_THREE:
        if n != 3 or np.issubdtype(np.dtype(dtype), np.complexfloating):
            raise ContractViolation(
                "tridiagonalize_inplace",
                f"order-3 closed form requires a real 3x3 matrix, got n={n} dtype={np.dtype(dtype)}",
            )


# -----------------------------------------------------------------------------
# Public drivers
# -----------------------------------------------------------------------------


def tridiagonalize_inplace(
    matrix: np.ndarray,
    diag: np.ndarray,
    subdiag: np.ndarray,
    extract_q: bool = False,
    *,
    config: Optional[ReductionConfig] = None,
    strategy: Optional[Strategy] = None,
) -> Strategy:
    """Tridiagonalize ``matrix`` in place, writing T's bands into diag/subdiag.

    diag must have length n and subdiag length n-1; neither is resized. With
    ``extract_q`` the buffer is overwritten with the explicit Q on return;
    otherwise its contents are strategy-specific scratch (the packed layout
    for the general path, the untouched input for the fixed-size paths).

    Returns the strategy that ran.
    """
    n = _check_square(matrix, "tridiagonalize_inplace")
    _check_inexact(matrix, "tridiagonalize_inplace")
    _check_length(diag, n, "diag", "tridiagonalize_inplace")
    _check_length(subdiag, n - 1, "subdiag", "tridiagonalize_inplace")

    config = DEFAULT_CONFIG if config is None else config
    if strategy is None:
        strategy = select_strategy(n, matrix.dtype, config)
    else:
        strategy = Strategy(strategy)
        _check_forced_strategy(strategy, n, matrix.dtype)

    logger.debug("tridiagonalize n=%d dtype=%s strategy=%s extract_q=%s", n, matrix.dtype, strategy.name, extract_q)
    _STRATEGIES[strategy](matrix, diag, subdiag, extract_q, config)
    return strategy


@dataclass
class TridiagonalForm:
    """Bands of T, and Q when requested, from ``tridiagonalize``."""

    diagonal: np.ndarray
    sub_diagonal: np.ndarray
    q: Optional[np.ndarray] = None


def tridiagonalize(
    matrix,
    *,
    extract_q: bool = False,
    config: Optional[ReductionConfig] = None,
) -> TridiagonalForm:
    """Tridiagonalize a copy of ``matrix``; the input is not modified."""
    a = np.asarray(matrix)
    work = np.array(a, dtype=np.result_type(a.dtype, np.float32), copy=True)
    n = _check_square(work, "tridiagonalize")

    real_dtype = work.real.dtype
    diag = np.empty(n, dtype=real_dtype)
    subdiag = np.empty(n - 1, dtype=real_dtype)
    tridiagonalize_inplace(work, diag, subdiag, extract_q, config=config)
    return TridiagonalForm(diagonal=diag, sub_diagonal=subdiag, q=work if extract_q else None)
