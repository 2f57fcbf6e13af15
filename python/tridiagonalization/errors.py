"""Exception hierarchy for the tridiagonalization package.

Contract violations are programmer errors (wrong shapes, querying results
before ``compute()``). They are raised explicitly rather than through
``assert`` so that ``python -O`` keeps them.
"""


class TridiagonalizationError(Exception):
    """Base exception for all tridiagonalization errors."""
    pass


class ContractViolation(TridiagonalizationError, AssertionError):
    """Raised when a caller breaks a precondition of a kernel or accessor."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")


class NotInitializedError(ContractViolation):
    """Raised when decomposition results are queried before compute()."""

    def __init__(self, operation: str):
        super().__init__(operation, "Tridiagonalization is not initialized.")
