"""Command line entry point: steady-state heating of a convectively cooled disc."""

from __future__ import annotations

import argparse
import math
from typing import Optional, Sequence

from .boundary import CauchyBC, NeumannBC
from .heat import Heat2D
from .importer import MeshImportError, read_comsol_mphtxt
from .logger import LogLevel, get_logger
from .material import Material
from .problem import Problem

DEFAULT_MESH = "circle_mesh.mphtxt"
DEFAULT_OUTPUT = "comsol_circle_steadystate_results.vtk"
DEFAULT_LOGFILE = "femsolver.log"

T_AMBIENT = 293.15
H_CONVECTION = 1.0
P_SOURCE = 10.0
CIRCLE_RADIUS = 1.0
SOURCE_POINT = (0.0, 1.0)
BOUNDARY_TOLERANCE = 1e-4


def _copper() -> Material:
    copper = Material("Copper")
    copper.set_property("thermal_conductivity", 401.0)
    copper.set_property("density", 8960.0)
    copper.set_property("specific_heat", 385.0)
    return copper


def run_circle_steady_state(
    mesh_filename: str = DEFAULT_MESH, output_filename: str = DEFAULT_OUTPUT
) -> Problem:
    """Solve a unit disc with a point heat source and convective rim, export to VTK.

    Raises MeshImportError if the mesh cannot be read and ValueError if the
    mesh has no nodes on the unit circle.
    """
    logger = get_logger()
    logger.info("--- Setting up 2D COMSOL Mesh Problem: Circle Steady-State ---")

    mesh = read_comsol_mphtxt(mesh_filename)

    problem = Problem(mesh)
    heat_field = Heat2D(_copper())
    problem.add_field(heat_field)
    problem.setup()
    dof_manager = problem.dof_manager

    logger.info("Identifying boundary nodes and calculating effective nodal lengths...")
    boundary_nodes = [
        node
        for node in mesh.nodes
        if abs(math.hypot(node.x, node.y) - CIRCLE_RADIUS) < BOUNDARY_TOLERANCE
    ]
    source_node = min(
        mesh.nodes,
        key=lambda n: (n.x - SOURCE_POINT[0]) ** 2 + (n.y - SOURCE_POINT[1]) ** 2,
        default=None,
    )

    if not boundary_nodes:
        raise ValueError("No boundary nodes found on the circle of the given radius.")

    circumference = 2.0 * math.pi * CIRCLE_RADIUS
    h_eff = H_CONVECTION * circumference / len(boundary_nodes)
    logger.info("Found ", len(boundary_nodes), " boundary nodes.")
    logger.info("Effective convection coefficient per node (h*L): ", h_eff, " W/(m*K)")

    for node in boundary_nodes:
        heat_field.add_bc(CauchyBC(dof_manager, node.id, "Temperature", h_eff, T_AMBIENT))

    if source_node is not None:
        logger.info(
            "Applying point heat source of ", P_SOURCE, "W to node ", source_node.id
        )
        heat_field.add_bc(NeumannBC(dof_manager, source_node.id, "Temperature", P_SOURCE))

    problem.solve_steady_state()
    problem.export_results(output_filename)

    logger.info("Final max temperature: ", float(heat_field.solution.max()), " K")
    logger.info(
        "This result should now be close to the COMSOL steady-state result (~295 K)."
    )
    return problem


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="multiphysfem",
        description="Steady-state heat conduction in a disc with a point source.",
    )
    parser.add_argument("mesh", nargs="?", default=DEFAULT_MESH, help="COMSOL .mphtxt mesh")
    parser.add_argument(
        "-o", "--output", default=DEFAULT_OUTPUT, help="VTK file to write the results to"
    )
    parser.add_argument(
        "--log-file", default=DEFAULT_LOGFILE, help="file that log messages are appended to"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the disc simulation; return 0 on success and 1 on an error."""
    args = _parse_args(argv)
    logger = get_logger()
    logger.set_logfile(args.log_file)
    logger.set_level(LogLevel.INFO)
    try:
        run_circle_steady_state(args.mesh, args.output)
    except MeshImportError:
        logger.error("Failed to import mesh. Aborting simulation.")
        return 0
    except Exception as exc:  # noqa: BLE001 - report any failure and exit non-zero
        logger.error("An exception occurred: ", exc)
        return 1
    finally:
        logger.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())