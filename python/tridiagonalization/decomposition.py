"""Tridiagonal decomposition object owning its packed buffer."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .errors import ContractViolation, NotInitializedError
from .householder import HouseholderSequence
from .reduction import packed_q, tridiagonalize_packed_

logger = logging.getLogger(__name__)


def _readonly(view: np.ndarray) -> np.ndarray:
    view = view.view()
    view.flags.writeable = False
    return view


class Tridiagonalization:
    """Tridiagonal decomposition A = Q T Q^H of a symmetric/Hermitian matrix.

    Only the lower triangle of the input is read. ``compute`` copies the
    input into an internal buffer and reduces it in place with the general
    packed reduction; the accessors interpret that buffer.

    Example
    -------
    >>> tri = Tridiagonalization().compute(a)
    >>> q = tri.matrix_q().materialize()
    >>> np.allclose(q @ tri.matrix_t() @ q.conj().T, a)
    True

    ``diagonal()``, ``sub_diagonal()`` and ``packed_matrix()`` are read-only
    views that reflect the buffer of the most recent ``compute``.
    ``matrix_q()``, ``matrix_t()`` and ``householder_coefficients()`` return
    independent values.

    A single instance must not be shared between threads calling
    ``compute``.
    """

    def __init__(self, matrix=None, *, size: Optional[int] = None):
        if size is None:
            size = 2 if matrix is None else np.shape(matrix)[0]
        if size < 1:
            raise ContractViolation("Tridiagonalization", f"size hint must be >= 1, got {size}")
        self._matrix = np.zeros((size, size), dtype=np.float64)
        self._coeffs = np.zeros(size - 1, dtype=np.float64)
        self._is_initialized = False
        if matrix is not None:
            self.compute(matrix)

    @property
    def size(self) -> int:
        return self._matrix.shape[0]

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def compute(self, matrix) -> "Tridiagonalization":
        """Decompose ``matrix``; returns self so calls can be chained."""
        a = np.asarray(matrix)
        if a.ndim != 2 or a.shape[0] != a.shape[1] or a.shape[0] == 0:
            raise ContractViolation("Tridiagonalization.compute", f"matrix must be square and non-empty, got shape {a.shape}")
        dtype = np.result_type(a.dtype, np.float32)
        n = a.shape[0]

        if self._matrix.shape != (n, n) or self._matrix.dtype != dtype:
            logger.debug("reallocating buffers: %s %s -> (%d, %d) %s", self._matrix.shape, self._matrix.dtype, n, n, dtype)
            self._matrix = np.empty((n, n), dtype=dtype)
            self._coeffs = np.empty(n - 1, dtype=dtype)

        # Invalid until the reduction below completes.
        self._is_initialized = False
        np.copyto(self._matrix, a)
        tridiagonalize_packed_(self._matrix, self._coeffs)
        self._is_initialized = True
        return self

    def _require_initialized(self, operation: str) -> None:
        if not self._is_initialized:
            raise NotInitializedError(f"Tridiagonalization.{operation}")

    def householder_coefficients(self) -> np.ndarray:
        """The n-1 reflector coefficients h_i, in reduction order."""
        self._require_initialized("householder_coefficients")
        return self._coeffs.copy()

    def packed_matrix(self) -> np.ndarray:
        """Read-only view of the packed buffer.

        Diagonal and first sub-diagonal (real parts) hold T; the entries
        below hold the essential parts of the reflector vectors, one column
        per reflector; the strict upper triangle is the input's.
        """
        self._require_initialized("packed_matrix")
        return _readonly(self._matrix)

    def matrix_q(self) -> HouseholderSequence:
        """Q as a lazy reflector sequence; use ``.materialize()`` for the matrix."""
        self._require_initialized("matrix_q")
        return packed_q(self._matrix.copy(), self._coeffs.copy())

    def matrix_t(self) -> np.ndarray:
        """The explicit tridiagonal matrix T (real band, buffer dtype)."""
        self._require_initialized("matrix_t")
        n = self.size
        t = self._matrix.copy()
        rows, cols = np.indices((n, n))
        t[np.abs(rows - cols) > 1] = 0
        np.fill_diagonal(t, self.diagonal())
        if n > 1:
            idx = np.arange(n - 1)
            sub = self.sub_diagonal()
            t[idx + 1, idx] = sub
            t[idx, idx + 1] = np.conj(sub)
        return t

    def diagonal(self) -> np.ndarray:
        """Read-only view of T's diagonal (real)."""
        self._require_initialized("diagonal")
        return _readonly(self._matrix.diagonal().real)

    def sub_diagonal(self) -> np.ndarray:
        """Read-only view of T's sub-diagonal (real)."""
        self._require_initialized("sub_diagonal")
        return _readonly(np.diagonal(self._matrix, offset=-1).real)
