"""Export of meshes and nodal solutions to legacy ASCII VTK files."""

from __future__ import annotations

from typing import Iterator

from .logger import get_logger

_VTK_CELL_TYPES = {"LineElement": 3, "TriElement": 5, "TetElement": 10}
_VTK_VERTEX = 1


def _g(value: float) -> str:
    return format(float(value), "g")


def _vtk_lines(problem) -> Iterator[str]:
    logger = get_logger()
    mesh = problem.mesh
    dof_manager = problem.dof_manager
    nodes = mesh.nodes
    elements = mesh.elements

    yield "# vtk DataFile Version 3.0\n"
    yield "FEM Solver Results\n"
    yield "ASCII\n"
    yield "DATASET UNSTRUCTURED_GRID\n"
    yield f"POINTS {len(nodes)} double\n"
    for node in nodes:
        yield " ".join(_g(c) for c in node.coords) + "\n"
    yield "\n"

    cell_list_size = sum(element.num_nodes() + 1 for element in elements)
    yield f"CELLS {len(elements)} {cell_list_size}\n"
    for element in elements:
        ids = "".join(f" {node.id}" for node in element.nodes)
        yield f"{element.num_nodes()}{ids}\n"
    yield "\n"

    yield f"CELL_TYPES {len(elements)}\n"
    for element in elements:
        type_name = element.type_name()
        cell_type = _VTK_CELL_TYPES.get(type_name)
        if cell_type is None:
            logger.warn("Unsupported element type for VTK export: ", type_name)
            cell_type = _VTK_VERTEX
        yield f"{cell_type}\n"
    yield "\n"

    yield f"POINT_DATA {len(nodes)}\n"
    for var_name in dof_manager.variable_names:
        field = problem.field(var_name)
        if field is None or field.solution.size == 0:
            continue
        yield f"SCALARS {var_name} double 1\n"
        yield "LOOKUP_TABLE default\n"
        for node in nodes:
            try:
                value = field.solution[dof_manager.equation_index(node.id, var_name)]
            except KeyError:
                value = 0.0
            yield f"{float(value):.6f}\n"


def write_vtk(filename, problem) -> None:
    """Write the mesh and every solved nodal field of ``problem`` to ``filename``.

    Raises OSError if the file cannot be opened for writing.
    """
    logger = get_logger()
    logger.info("Exporting results to VTK file: ", filename)
    try:
        handle = open(filename, "w", encoding="ascii", newline="\n")
    except OSError:
        logger.error("Failed to open file for writing: ", filename)
        raise
    with handle:
        handle.writelines(_vtk_lines(problem))
    logger.info("Successfully wrote VTK file: ", filename)