"""Mapping from (node, variable) pairs to global equation numbers."""

from __future__ import annotations

from typing import Dict, List, Tuple

from .logger import get_logger
from .mesh import Mesh


class DOFManager:
    """Numbers the degrees of freedom of a mesh, node by node, then variable by variable."""

    def __init__(self, mesh: Mesh) -> None:
        self.mesh = mesh
        self.variable_names: List[str] = []
        self._dof_map: Dict[Tuple[int, int], int] = {}
        self._num_equations = 0

    def register_variable(self, var_name: str) -> None:
        """Add a variable that every node carries."""
        self.variable_names.append(var_name)
        get_logger().info("DOFManager: Registered variable '", var_name, "'.")

    def build(self) -> None:
        """Assign an equation number to every (node, variable) pair."""
        logger = get_logger()
        logger.info("DOFManager: Building DOF map...")
        self._dof_map = {}
        equation = 0
        for node in self.mesh.nodes:
            for var_idx in range(len(self.variable_names)):
                self._dof_map[(node.id, var_idx)] = equation
                equation += 1
        self._num_equations = equation
        logger.info("DOFManager: Built map with ", self._num_equations, " equations.")

    def equation_index(self, node_id: int, var_name: str) -> int:
        """Global equation number of ``var_name`` at node ``node_id``.

        Raises KeyError if the variable is not registered or the node has no DOF.
        """
        try:
            var_idx = self.variable_names.index(var_name)
        except ValueError:
            raise KeyError(f"DOFManager: Variable '{var_name}' not registered.") from None
        try:
            return self._dof_map[(node_id, var_idx)]
        except KeyError:
            raise KeyError(
                f"DOFManager: DOF for node {node_id} and var '{var_name}' not found."
            ) from None

    def num_equations(self) -> int:
        """Total number of equations after the last build."""
        return self._num_equations