"""Heat conduction fields on 1D line meshes and 2D triangle meshes."""

from __future__ import annotations

from itertools import product
from typing import List, Sequence, Tuple

import numpy as np

from .dof_manager import DOFManager
from .field import PhysicsField
from .logger import get_logger
from .material import Material
from .mesh import LineElement, Mesh, TriElement

_Triplets = Tuple[List[int], List[int], List[float]]

_TRI_MASS_PATTERN = np.array([[2.0, 1.0, 1.0], [1.0, 2.0, 1.0], [1.0, 1.0, 2.0]])


def _empty_triplets() -> _Triplets:
    return [], [], []


def _append_local(target: _Triplets, dofs: Sequence[int], local) -> None:
    rows, cols, vals = target
    for (a, r), (b, c) in product(enumerate(dofs), repeat=2):
        rows.append(r)
        cols.append(c)
        vals.append(float(local[a][b]))


class _HeatField(PhysicsField):
    """Shared state of the heat conduction fields."""

    variable_name = "Temperature"

    def __init__(self, material: Material) -> None:
        super().__init__()
        self.material = material
        self.k = 0.0
        self.rho = 0.0
        self.cp = 0.0
        self.volumetric_heat_source = np.zeros(0)

    def _setup_heat(self, mesh: Mesh, dof_manager: DOFManager) -> None:
        PhysicsField.setup(self, mesh, dof_manager)
        self.k = self.material.get("thermal_conductivity")
        self.rho = self.material.get("density")
        self.cp = self.material.get("specific_heat")
        logger = get_logger()
        logger.info(
            "Setting up ", self.name, " for mesh with material '", self.material.name, "'."
        )
        logger.info("-> k = ", self.k, ", rho = ", self.rho, ", cp = ", self.cp)
        self.volumetric_heat_source = np.zeros(len(mesh.elements))

    def _element_dofs(self, element) -> List[int]:
        return [
            self.dof_manager.equation_index(node.id, self.variable_name)
            for node in element.nodes
        ]

    def _finish(self, k_entries: _Triplets, m_entries: _Triplets) -> None:
        rows, cols, vals = k_entries
        for dof in self._other_variable_dofs():
            rows.append(dof)
            cols.append(dof)
            vals.append(1.0)
        self.stiffness = self._matrix_from_triplets(*k_entries)
        self.mass = self._matrix_from_triplets(*m_entries)
        get_logger().info("Assembly for ", self.name, " complete.")


class Heat1D(_HeatField):
    """Transient heat conduction on two-node line elements."""

    name = "Heat Transfer 1D"

    def setup(self, mesh: Mesh, dof_manager: DOFManager) -> None:
        """Read the thermal properties and allocate a zero heat source per element."""
        self._setup_heat(mesh, dof_manager)

    def assemble(self) -> None:
        """Build the conductance and consistent mass matrices and the source load."""
        get_logger().info("Assembling system for ", self.name)
        self.rhs = np.zeros(self.dof_manager.num_equations())
        k_entries = _empty_triplets()
        m_entries = _empty_triplets()

        for element, source in zip(self.mesh.elements, self.volumetric_heat_source):
            if not isinstance(element, LineElement):
                continue
            h = element.length()
            ke = self.k / h
            m = self.rho * self.cp * h / 6.0
            dofs = self._element_dofs(element)
            _append_local(k_entries, dofs, [[ke, -ke], [-ke, ke]])
            _append_local(m_entries, dofs, [[2.0 * m, m], [m, 2.0 * m]])
            load = source * h / 2.0
            for dof in dofs:
                self.rhs[dof] += load

        self._finish(k_entries, m_entries)

    def set_volumetric_heat_source(self, source) -> None:
        """Set one volumetric heat source value per element."""
        values = np.asarray(source, dtype=float)
        if values.shape != (len(self.mesh.elements),):
            get_logger().error("Heat source vector size mismatch in Heat1D.")
            raise ValueError("Heat source vector size mismatch in Heat1D.")
        self.volumetric_heat_source = values


class Heat2D(_HeatField):
    """Transient heat conduction on three-node linear triangles."""

    name = "Heat Transfer 2D"

    def setup(self, mesh: Mesh, dof_manager: DOFManager) -> None:
        """Read the thermal properties and allocate a zero heat source per element."""
        self._setup_heat(mesh, dof_manager)

    def assemble(self) -> None:
        """Build the conductance and consistent mass matrices and the source load."""
        get_logger().info("Assembling system for ", self.name)
        self.rhs = np.zeros(self.dof_manager.num_equations())
        k_entries = _empty_triplets()
        m_entries = _empty_triplets()

        for element, source in zip(self.mesh.elements, self.volumetric_heat_source):
            if not isinstance(element, TriElement):
                continue
            area = element.area()
            b = element.b_matrix()
            ke = self.k * area * (b.T @ b)
            me = (self.rho * self.cp * area / 12.0) * _TRI_MASS_PATTERN
            dofs = self._element_dofs(element)
            _append_local(k_entries, dofs, ke)
            _append_local(m_entries, dofs, me)
            load = source * area / 3.0
            if load != 0.0:
                for dof in dofs:
                    self.rhs[dof] += load

        self._finish(k_entries, m_entries)

    def set_volumetric_heat_source(self, source) -> None:
        """Set one volumetric heat source value per element."""
        self.volumetric_heat_source = np.asarray(source, dtype=float)