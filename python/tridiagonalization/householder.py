"""householder

Householder reflector construction and lazily applied reflector sequences
for real and complex (Hermitian) scalars.

Conventions
-----------
A reflector is stored as its *essential part*: the tail of v, with the
leading entry v[0] = 1 left implicit. Together with a scalar tau it
describes

    H = I - tau v v^H

``make_householder_in_place`` chooses tau so that H x = beta e0 with beta
real (and non-negative whenever H is not the identity).

A ``HouseholderSequence`` packs several such vectors column by column in a
single matrix, the way the tridiagonal reduction leaves them below the
sub-diagonal of its buffer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

import numpy as np

from .errors import ContractViolation


# -----------------------------------------------------------------------------
# Reflector primitive
# -----------------------------------------------------------------------------


def make_householder_in_place(x: np.ndarray) -> Tuple[np.generic, np.generic]:
    """Overwrite x[1:] with the essential part of a Householder vector.

    Returns (tau, beta) with (I - tau v v^H) x = [beta, 0, ..., 0]^T, where
    v = [1, x[1:]] after the call. x[0] is not modified.

    If the tail of x is zero and x[0] is real, the reflector is the
    identity: tau = 0, beta = x[0] and the tail is zeroed.
    """
    if x.ndim != 1 or x.shape[0] == 0:
        raise ContractViolation("make_householder_in_place", "x must be a non-empty 1-D array")
    if not np.issubdtype(x.dtype, np.inexact):
        raise ContractViolation("make_householder_in_place", f"x must have a floating or complex dtype, got {x.dtype}")

    real_type = np.finfo(x.dtype).dtype.type
    tiny = float(np.finfo(x.dtype).tiny)

    c0 = x[0]
    tail = x[1:]
    sigma = float(np.vdot(tail, tail).real)
    c0_imag = float(np.imag(c0))

    if sigma <= tiny and c0_imag * c0_imag <= tiny:
        tail[...] = 0
        return x.dtype.type(0), real_type(np.real(c0))

    beta = float(np.sqrt(abs(c0) ** 2 + sigma))
    # x0 - beta, rewritten to avoid cancellation when Re(x0) > 0.
    if np.real(c0) <= 0:
        denom = c0 - beta
    elif np.iscomplexobj(x):
        denom = (-sigma + 2j * beta * c0_imag) / (np.conj(c0) + beta)
    else:
        denom = -sigma / (c0 + beta)

    tail /= denom
    tau = np.conj(-denom / beta)
    return x.dtype.type(tau), real_type(beta)


def householder_vector(x: np.ndarray) -> Tuple[np.ndarray, np.generic, np.generic]:
    """Return (v, tau, beta) for x without modifying it; v[0] = 1."""
    x = np.asarray(x)
    v = np.array(x, dtype=np.result_type(x.dtype, np.float32), copy=True)
    tau, beta = make_householder_in_place(v)
    v[0] = 1
    return v, tau, beta


# -----------------------------------------------------------------------------
# Reflector sequences
# -----------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class HouseholderSequence:
    """Lazy product Q = G_0 G_1 ... G_{m-1} of packed Householder reflectors.

    G_k = I - c_k v_k v_k^H where c_k = coeffs[k] (conjugated if
    ``conjugate``) and v_k is zero above row k+shift, one at row k+shift and
    ``vectors[k+shift+1:, k]`` below. With ``adjoint`` the sequence stands
    for Q^H instead.

    Applying the sequence costs O(m n k) for an n-by-k operand; the explicit
    n-by-n matrix is only formed by ``materialize()``.
    """

    vectors: np.ndarray
    coeffs: np.ndarray
    conjugate: bool = False
    shift: int = 0
    adjoint: bool = False

    def __post_init__(self) -> None:
        if self.vectors.ndim != 2:
            raise ContractViolation("HouseholderSequence", "vectors must be 2-D")
        if self.coeffs.ndim != 1:
            raise ContractViolation("HouseholderSequence", "coeffs must be 1-D")
        if self.shift < 0:
            raise ContractViolation("HouseholderSequence", "shift must be non-negative")
        m = self.coeffs.shape[0]
        if m > self.vectors.shape[1] or m + self.shift > self.vectors.shape[0]:
            raise ContractViolation(
                "HouseholderSequence",
                f"{m} reflectors with shift {self.shift} do not fit in vectors of shape {self.vectors.shape}",
            )

    def __len__(self) -> int:
        return self.coeffs.shape[0]

    @property
    def rows(self) -> int:
        return self.vectors.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return np.result_type(self.vectors.dtype, self.coeffs.dtype)

    @property
    def H(self) -> "HouseholderSequence":
        """The adjoint sequence, still unevaluated."""
        return replace(self, adjoint=not self.adjoint)

    def essential_vector(self, k: int) -> np.ndarray:
        start = k + self.shift
        return self.vectors[start + 1 :, k]

    def _reflector(self, k: int) -> Tuple[int, np.ndarray, np.generic]:
        start = k + self.shift
        v = np.empty(self.rows - start, dtype=self.dtype)
        v[0] = 1
        v[1:] = self.essential_vector(k)
        c = self.coeffs[k]
        # G_k^H swaps c_k for its conjugate.
        if self.conjugate != self.adjoint:
            c = np.conj(c)
        return start, v, c

    def apply(self, other) -> np.ndarray:
        """Return Q @ other (or Q^H @ other) as a new array."""
        other = np.asarray(other)
        if other.ndim not in (1, 2) or other.shape[0] != self.rows:
            raise ContractViolation(
                "HouseholderSequence.apply",
                f"operand of shape {other.shape} does not have {self.rows} rows",
            )
        out = np.array(other, dtype=np.result_type(self.dtype, other.dtype), copy=True)
        work = out.reshape(self.rows, -1)

        m = len(self)
        # Q X = G_0 (G_1 (... G_{m-1} X)); Q^H X starts from G_0^H.
        order = range(m) if self.adjoint else range(m - 1, -1, -1)
        for k in order:
            start, v, c = self._reflector(k)
            if c == 0:
                continue
            block = work[start:]
            block -= c * np.outer(v, v.conj() @ block)
        return out

    def materialize(self) -> np.ndarray:
        """Form the explicit unitary matrix (O(n^3))."""
        return self.apply(np.eye(self.rows, dtype=self.dtype))

    def __matmul__(self, other) -> np.ndarray:
        return self.apply(other)

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        q = self.materialize()
        return q if dtype is None else q.astype(dtype)
