"""Base class for physics fields that assemble and hold a linear system."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional

import numpy as np
from scipy import sparse

from .boundary import BoundaryCondition
from .dof_manager import DOFManager
from .logger import get_logger
from .mesh import Mesh


class PhysicsField(ABC):
    """A field owning its stiffness and mass matrices, load vector and solution."""

    def __init__(self) -> None:
        self.mesh: Optional[Mesh] = None
        self.dof_manager: Optional[DOFManager] = None
        self.stiffness = sparse.csr_matrix((0, 0))
        self.mass = sparse.csr_matrix((0, 0))
        self.rhs = np.zeros(0)
        self.solution = np.zeros(0)
        self.previous_solution = np.zeros(0)
        self.bcs: List[BoundaryCondition] = []

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the physics."""

    @property
    @abstractmethod
    def variable_name(self) -> str:
        """Name of the nodal variable this field solves for."""

    def setup(self, mesh: Mesh, dof_manager: DOFManager) -> None:
        """Bind to a mesh and DOF numbering and allocate zeroed storage."""
        self.mesh = mesh
        self.dof_manager = dof_manager
        n = dof_manager.num_equations()
        self.stiffness = sparse.csr_matrix((n, n))
        self.mass = sparse.csr_matrix((n, n))
        self.rhs = np.zeros(n)
        self.solution = np.zeros(n)
        self.previous_solution = np.zeros(n)

    @abstractmethod
    def assemble(self) -> None:
        """Build the stiffness matrix, mass matrix and load vector."""

    def add_bc(self, bc: BoundaryCondition) -> None:
        self.bcs.append(bc)

    def apply_bcs(self) -> None:
        """Apply every boundary condition to the stiffness matrix and load vector."""
        get_logger().info("Applying ", len(self.bcs), " BCs for ", self.name)
        for bc in self.bcs:
            bc.apply(self.stiffness, self.rhs)

    def update_previous_solution(self) -> None:
        self.previous_solution = self.solution.copy()

    def set_initial_conditions(self, value: float) -> None:
        """Fill the current and previous solution with ``value``; needs setup first."""
        if self.solution.size == 0:
            raise RuntimeError(
                f"Cannot set initial conditions before field setup for '{self.variable_name}'."
            )
        self.solution.fill(value)
        self.previous_solution = self.solution.copy()
        get_logger().info(
            "Set initial condition for '", self.variable_name, "' to ", float(value)
        )

    def _other_variable_dofs(self) -> Iterator[int]:
        """Equation numbers of every variable except this field's own."""
        for var_name in self.dof_manager.variable_names:
            if var_name == self.variable_name:
                continue
            for node in self.mesh.nodes:
                yield self.dof_manager.equation_index(node.id, var_name)

    def _matrix_from_triplets(
        self, rows: Iterable[int], cols: Iterable[int], values: Iterable[float]
    ):
        """Square CSR matrix summing duplicate (row, col) contributions."""
        n = self.dof_manager.num_equations()
        rows = np.fromiter(rows, dtype=np.int64)
        cols = np.fromiter(cols, dtype=np.int64)
        values = np.fromiter(values, dtype=float)
        return sparse.coo_matrix((values, (rows, cols)), shape=(n, n)).tocsr()