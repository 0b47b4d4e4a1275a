"""Direct sparse LU solution of linear systems."""

from __future__ import annotations

import numpy as np
from scipy import sparse
from scipy.sparse.linalg import splu

from .logger import get_logger


class SolverError(RuntimeError):
    """The linear system could not be factorised or solved."""


def solve(A, b) -> np.ndarray:
    """Solve ``A x = b`` with a sparse LU factorisation and return ``x``."""
    logger = get_logger()
    logger.info("Starting linear solve...")
    try:
        lu = splu(sparse.csc_matrix(A, dtype=float))
    except (RuntimeError, ValueError) as exc:
        logger.error("Linear solver: LU decomposition failed.")
        raise SolverError("LU decomposition failed.") from exc

    x = lu.solve(np.asarray(b, dtype=float))
    if not np.all(np.isfinite(x)):
        logger.error("Linear solver: The solve step failed.")
        raise SolverError("The solve step failed.")

    logger.info("Linear solve successful.")
    return x