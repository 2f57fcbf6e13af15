"""Dense self-adjoint kernels that read and write only the lower triangle.

The strict upper triangle of the blocks passed here is never touched, so a
buffer may keep unrelated data there (the tridiagonal reduction relies on
this to leave the caller's upper triangle intact).
"""

from __future__ import annotations

import numpy as np

from .errors import ContractViolation


def _check_square(block: np.ndarray, operation: str) -> int:
    if block.ndim != 2 or block.shape[0] != block.shape[1]:
        raise ContractViolation(operation, f"expected a square block, got shape {block.shape}")
    return block.shape[0]


def _as_columns(x: np.ndarray, n: int, operation: str) -> np.ndarray:
    x = np.asarray(x)
    if x.ndim == 1:
        x = x.reshape(-1, 1)
    if x.ndim != 2 or x.shape[0] != n:
        raise ContractViolation(operation, f"operand of shape {x.shape} does not have {n} rows")
    return x


def selfadjoint_lower_matvec(block: np.ndarray, x: np.ndarray) -> np.ndarray:
    """y = S x where S is the Hermitian matrix stored in the lower triangle of block.

    The diagonal is read as real, as for any Hermitian matrix.
    """
    n = _check_square(block, "selfadjoint_lower_matvec")
    x = np.asarray(x)
    if x.shape != (n,):
        raise ContractViolation("selfadjoint_lower_matvec", f"x must have shape ({n},), got {x.shape}")
    strict = np.tril(block, -1)
    return strict @ x + strict.conj().T @ x + block.diagonal().real * x


def selfadjoint_rank_update_(block: np.ndarray, u, w, alpha) -> None:
    """In-place S += alpha u w^H + conj(alpha) w u^H on the lower triangle of block.

    u and w are vectors (rank 2 update) or n-by-k matrices (rank 2k update).
    """
    n = _check_square(block, "selfadjoint_rank_update_")
    u = _as_columns(u, n, "selfadjoint_rank_update_")
    w = _as_columns(w, n, "selfadjoint_rank_update_")
    if u.shape != w.shape:
        raise ContractViolation("selfadjoint_rank_update_", f"u {u.shape} and w {w.shape} differ in shape")

    half = alpha * (u @ w.conj().T)
    update = half + half.conj().T
    rows, cols = np.tril_indices(n)
    block[rows, cols] += update[rows, cols]
