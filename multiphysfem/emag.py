"""Electric conduction fields with optional temperature-dependent conductivity."""

from __future__ import annotations

from itertools import product
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .dof_manager import DOFManager
from .field import PhysicsField
from .logger import get_logger
from .material import Material
from .mesh import Element, LineElement, Mesh, TriElement

_DEFAULT_TEMPERATURE = 300.0
_TEMPERATURE = "Temperature"

_Triplets = Tuple[List[int], List[int], List[float]]


def _append_local(target: _Triplets, dofs: Sequence[int], local) -> None:
    rows, cols, vals = target
    for (a, r), (b, c) in product(enumerate(dofs), repeat=2):
        rows.append(r)
        cols.append(c)
        vals.append(float(local[a][b]))


class _EMagField(PhysicsField):
    """Shared state of the electric conduction fields."""

    variable_name = "Voltage"

    def __init__(self, material: Material) -> None:
        super().__init__()
        self.material = material
        self.heat_field: Optional[PhysicsField] = None

    def _setup_emag(self, mesh: Mesh, dof_manager: DOFManager) -> None:
        PhysicsField.setup(self, mesh, dof_manager)
        get_logger().info(
            "Setting up ", self.name, " for mesh with material '", self.material.name, "'."
        )

    def _has_temperatures(self) -> bool:
        return self.heat_field is not None and self.heat_field.solution.size > 0

    def _average_temperature(self, element: Element) -> float:
        if not self._has_temperatures():
            return _DEFAULT_TEMPERATURE
        temperatures = self.heat_field.solution
        return float(
            np.mean(
                [
                    temperatures[self.dof_manager.equation_index(node.id, _TEMPERATURE)]
                    for node in element.nodes
                ]
            )
        )

    def _conductivity(self, temperature: float) -> float:
        return self.material.get("electrical_conductivity", temperature)

    def _element_dofs(self, element: Element) -> List[int]:
        return [
            self.dof_manager.equation_index(node.id, self.variable_name)
            for node in element.nodes
        ]

    def _finish(self, entries: _Triplets) -> None:
        rows, cols, vals = entries
        for dof in self._other_variable_dofs():
            rows.append(dof)
            cols.append(dof)
            vals.append(1.0)
        self.stiffness = self._matrix_from_triplets(rows, cols, vals)
        get_logger().info("Assembly for ", self.name, " complete.")


class EMag1D(_EMagField):
    """Electric conduction on two-node line elements."""

    name = "Electromagnetics 1D"

    def set_coupled_heat_field(self, heat_field: Optional[PhysicsField]) -> None:
        """Take element temperatures from ``heat_field``; None uses the default."""
        self.heat_field = heat_field

    def setup(self, mesh: Mesh, dof_manager: DOFManager) -> None:
        """Bind the mesh and DOF map and allocate zeroed storage."""
        self._setup_emag(mesh, dof_manager)

    def assemble(self) -> None:
        """Build the conductance matrix; the load vector stays zero."""
        get_logger().info("Assembling system for ", self.name)
        self.rhs = np.zeros(self.dof_manager.num_equations())
        entries: _Triplets = ([], [], [])
        for element in self.mesh.elements:
            if not isinstance(element, LineElement):
                continue
            sigma = self._conductivity(self._average_temperature(element))
            ke = sigma / element.length()
            _append_local(entries, self._element_dofs(element), [[ke, -ke], [-ke, ke]])
        self._finish(entries)

    def joule_heat(self) -> np.ndarray:
        """Volumetric Joule heat sigma*E^2 of each element, zero for other types."""
        heat = np.zeros(len(self.mesh.elements))
        for i, element in enumerate(self.mesh.elements):
            if not isinstance(element, LineElement):
                continue
            sigma = self._conductivity(self._average_temperature(element))
            v_i, v_j = (self.solution[d] for d in self._element_dofs(element))
            field_strength = abs(v_i - v_j) / element.length()
            heat[i] = sigma * field_strength * field_strength
        return heat


class EMag2D(_EMagField):
    """Electric conduction on three-node linear triangles."""

    name = "Electromagnetics 2D"

    def set_coupled_heat_field(self, heat_field: Optional[PhysicsField]) -> None:
        """Take element temperatures from ``heat_field``; None uses the default."""
        self.heat_field = heat_field

    def setup(self, mesh: Mesh, dof_manager: DOFManager) -> None:
        """Bind the mesh and DOF map and allocate zeroed storage."""
        self._setup_emag(mesh, dof_manager)

    def _assembly_temperature(self, element: Element) -> float:
        if not self._has_temperatures():
            return _DEFAULT_TEMPERATURE
        try:
            return self._average_temperature(element)
        except KeyError:
            get_logger().warn(
                "    Element ", element.id, " has missing temperature DOFs. Using default T_avg."
            )
            return _DEFAULT_TEMPERATURE

    def assemble(self) -> None:
        """Build the conductance matrix; degenerate elements are skipped."""
        logger = get_logger()
        logger.info("Assembling system for ", self.name)
        self.rhs = np.zeros(self.dof_manager.num_equations())
        entries: _Triplets = ([], [], [])
        for element in self.mesh.elements:
            if not isinstance(element, TriElement):
                continue
            sigma = self._conductivity(self._assembly_temperature(element))
            area = element.area()
            if area <= 0:
                logger.error(
                    "    Element ", element.id, " has zero or negative area! Skipping."
                )
                continue
            b = element.b_matrix()
            ke = sigma * area * (b.T @ b)
            _append_local(entries, self._element_dofs(element), ke)
        self._finish(entries)

    def joule_heat(self) -> np.ndarray:
        """Volumetric Joule heat sigma*|grad V|^2 of each element."""
        heat = np.zeros(len(self.mesh.elements))
        for i, element in enumerate(self.mesh.elements):
            if not isinstance(element, TriElement):
                continue
            sigma = self._conductivity(self._average_temperature(element))
            voltages = self.solution[self._element_dofs(element)]
            gradient = element.b_matrix() @ voltages
            heat[i] = sigma * float(gradient @ gradient)
        return heat