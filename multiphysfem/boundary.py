"""Boundary conditions applied to an assembled sparse system K u = F."""

from __future__ import annotations

import warnings
from abc import ABC, abstractmethod

import numpy as np
from scipy import sparse

from .dof_manager import DOFManager


def _require_csr(K) -> None:
    if not sparse.issparse(K) or K.format != "csr":
        raise TypeError("Boundary conditions operate on a CSR sparse matrix.")


def _set_entry(K, i: int, value: float) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", sparse.SparseEfficiencyWarning)
        K[i, i] = value


class BoundaryCondition(ABC):
    """A condition on one degree of freedom of the global system."""

    def __init__(self, dof_manager: DOFManager, node_id: int, var_name: str) -> None:
        self.node_id = node_id
        self.var_name = var_name
        self.equation_index = dof_manager.equation_index(node_id, var_name)

    @abstractmethod
    def apply(self, K, F: np.ndarray) -> None:
        """Modify the CSR matrix ``K`` and vector ``F`` in place."""

    def _check_index(self, size: int) -> None:
        if not 0 <= self.equation_index < size:
            raise IndexError(
                f"{type(self).__name__}: Invalid equation index {self.equation_index}"
            )


class DirichletBC(BoundaryCondition):
    """Fixes the value of a degree of freedom."""

    def __init__(self, dof_manager: DOFManager, node_id: int, var_name: str, value: float) -> None:
        super().__init__(dof_manager, node_id, var_name)
        self.value = float(value)

    def apply(self, K, F: np.ndarray) -> None:
        _require_csr(K)
        self._check_index(K.shape[0])
        i = self.equation_index
        K.sum_duplicates()

        column = K[:, [i]].toarray().ravel()
        column[i] = 0.0
        F -= column * self.value

        K.data[K.indptr[i]:K.indptr[i + 1]] = 0.0
        K.data[K.indices == i] = 0.0
        _set_entry(K, i, 1.0)
        F[i] = self.value
        K.eliminate_zeros()


class NeumannBC(BoundaryCondition):
    """Adds a nodal flux to the right-hand side; positive flows into the domain."""

    def __init__(self, dof_manager: DOFManager, node_id: int, var_name: str, flux_value: float) -> None:
        super().__init__(dof_manager, node_id, var_name)
        self.flux_value = float(flux_value)

    def apply(self, K, F: np.ndarray) -> None:
        self._check_index(F.shape[0])
        F[self.equation_index] += self.flux_value


class CauchyBC(BoundaryCondition):
    """Convective condition h (T_inf - T): adds h to K and h*T_inf to F."""

    def __init__(
        self, dof_manager: DOFManager, node_id: int, var_name: str, h: float, t_inf: float
    ) -> None:
        super().__init__(dof_manager, node_id, var_name)
        self.h = float(h)
        self.t_inf = float(t_inf)

    def apply(self, K, F: np.ndarray) -> None:
        _require_csr(K)
        self._check_index(K.shape[0])
        i = self.equation_index
        _set_entry(K, i, K[i, i] + self.h)
        F[i] += self.h * self.t_inf