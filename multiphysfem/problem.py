"""A multiphysics problem: mesh, DOF numbering, fields and their solvers."""

from __future__ import annotations

from typing import List, Optional

from .dof_manager import DOFManager
from .emag import EMag1D, EMag2D
from .exporter import write_vtk
from .field import PhysicsField
from .heat import Heat1D, Heat2D
from .linear_solver import solve
from .logger import get_logger
from .mesh import Mesh


class Problem:
    """Owns a mesh and its fields and drives steady and transient solves."""

    def __init__(self, mesh: Mesh) -> None:
        self.mesh = mesh
        self.dof_manager = DOFManager(mesh)
        self.fields: List[PhysicsField] = []
        self.max_iterations = 20
        self.convergence_tolerance = 1e-4
        self.time_step = 0.1
        self.total_time = 1.0

    def add_field(self, field: PhysicsField) -> None:
        """Add a field and register its variable with the DOF manager."""
        self.dof_manager.register_variable(field.variable_name)
        self.fields.append(field)

    def field(self, var_name: str) -> Optional[PhysicsField]:
        """The first field solving for ``var_name``, or None."""
        return next((f for f in self.fields if f.variable_name == var_name), None)

    def setup(self) -> None:
        """Number the DOFs and set up every field."""
        logger = get_logger()
        logger.info("--- Problem Setup ---")
        self.dof_manager.build()
        for field in self.fields:
            field.setup(self.mesh, self.dof_manager)
        logger.info("--- Problem Setup Complete ---")

    def set_iterative_solver_parameters(self, max_iter: int, tol: float) -> None:
        self.max_iterations = max_iter
        self.convergence_tolerance = tol

    def set_time_stepping(self, time_step: float, total_time: float) -> None:
        self.time_step = time_step
        self.total_time = total_time

    def export_results(self, filename) -> None:
        """Write the mesh and solutions to a legacy VTK file."""
        write_vtk(filename, self)

    @staticmethod
    def _solve_static(field: PhysicsField) -> None:
        field.assemble()
        field.apply_bcs()
        field.solution = solve(field.stiffness, field.rhs)

    @staticmethod
    def _implicit_step(field: PhysicsField, dt: float) -> None:
        """One backward-Euler step from the field's previous solution."""
        scaled_mass = field.mass / dt
        A = (scaled_mass + field.stiffness).tocsr()
        b = field.rhs + scaled_mass @ field.previous_solution
        for bc in field.bcs:
            bc.apply(A, b)
        field.solution = solve(A, b)
        field.update_previous_solution()

    def solve_steady_state(self) -> None:
        """Solve every field; a 2D voltage/temperature pair is solved one-way coupled."""
        logger = get_logger()
        logger.info("\n--- Starting Steady-State Solve ---")
        emag = self.field("Voltage")
        heat = self.field("Temperature")

        if isinstance(emag, EMag2D) and isinstance(heat, Heat2D):
            logger.info("\n--- Solving Coupled 2D Electro-Thermal Problem ---")
            emag.set_coupled_heat_field(None)
            logger.info("--> Solving EMag Field (assuming constant properties)...")
            self._solve_static(emag)
            heat.set_volumetric_heat_source(emag.joule_heat())
            logger.info("--> Solving Heat Field...")
            self._solve_static(heat)
        else:
            logger.info("\n--- Solving Uncoupled Steady-State Physics ---")
            for field in self.fields:
                logger.info("Solving for field: ", field.name)
                self._solve_static(field)

        logger.info("\n--- Steady-State Solve Finished ---")

    def solve_transient(self) -> None:
        """Backward-Euler time stepping of a single field or a voltage/temperature pair.

        Raises ValueError for any other combination of fields.
        """
        logger = get_logger()
        logger.info("\n--- Starting Transient Solve ---")
        dt = self.time_step
        logger.info("Time Step: ", dt, "s, Total Time: ", self.total_time, "s")
        num_steps = int(self.total_time / dt)

        emag = self.field("Voltage")
        heat = self.field("Temperature")

        if emag is not None and heat is not None:
            logger.info("\n--- Solving Coupled Transient Problem ---")
            is_emag = isinstance(emag, (EMag1D, EMag2D))
            if is_emag:
                emag.set_coupled_heat_field(heat)
            for step in range(1, num_steps + 1):
                logger.info("Time Step ", step, " / ", num_steps, ", Time = ", step * dt, "s")
                self._solve_static(emag)
                if is_emag and isinstance(heat, (Heat1D, Heat2D)):
                    heat.set_volumetric_heat_source(emag.joule_heat())
                heat.assemble()
                self._implicit_step(heat, dt)
        elif len(self.fields) == 1:
            logger.info("\n--- Solving Single-Field Transient Problem ---")
            field = self.fields[0]
            field.assemble()
            for step in range(1, num_steps + 1):
                logger.info("Time Step ", step, " / ", num_steps, ", Time = ", step * dt, "s")
                self._implicit_step(field, dt)
        else:
            message = "Transient solver only supports single field or coupled EMag-Heat problems."
            logger.error(message)
            raise ValueError(message)

        logger.info("\n--- Transient Solve Finished ---")