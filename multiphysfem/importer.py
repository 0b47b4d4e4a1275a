"""Reading triangle meshes from COMSOL .mphtxt text files."""

from __future__ import annotations

from itertools import islice
from typing import Callable, Iterator, List, Optional

from .logger import get_logger
from .mesh import Mesh, Node, TriElement


class MeshImportError(RuntimeError):
    """A mesh file could not be read or held no usable mesh."""


def _parse(line: str, convert: Callable[[str], object], count: int) -> Optional[List]:
    tokens = line.split()
    if len(tokens) < count:
        return None
    try:
        return [convert(token) for token in tokens[:count]]
    except ValueError:
        return None


def _leading_int(line: str) -> int:
    values = _parse(line, int, 1)
    return values[0] if values else 0


def _skip_past(lines: Iterator[str], marker: str) -> str:
    """Consume lines up to and including the first one holding ``marker``."""
    for line in lines:
        if marker in line:
            return line
    return ""


def _read_vertices(lines: Iterator[str], mesh: Mesh) -> None:
    for line in lines:
        if "number of mesh vertices" not in line:
            continue
        count = max(_leading_int(line), 0)
        _skip_past(lines, "# Mesh vertex coordinates")
        for data in islice(lines, count):
            coords = _parse(data, float, 2)
            if coords is not None:
                mesh.add_node(Node(len(mesh.nodes), coords[0], coords[1]))
        get_logger().info("Finished reading ", len(mesh.nodes), " vertices.")
        return


def _read_triangles(lines: Iterator[str], mesh: Mesh) -> None:
    logger = get_logger()
    for line in lines:
        if "3 tri # type name" not in line:
            continue
        count = max(_leading_int(_skip_past(lines, "number of elements")), 0)
        _skip_past(lines, "# Elements")
        next_id = 0
        for data in islice(lines, count):
            ids = _parse(data, int, 3)
            if ids is None:
                continue
            nodes = [mesh.node(i) for i in ids]
            if any(node is None for node in nodes):
                logger.error("Invalid node index found in element definition: ", data)
                continue
            tri = TriElement(next_id)
            next_id += 1
            for node in nodes:
                tri.add_node(node)
            mesh.add_element(tri)
        logger.info("Finished reading ", len(mesh.elements), " elements.")
        return


def read_comsol_mphtxt(filename) -> Mesh:
    """Read the vertices and linear triangles of a COMSOL text mesh.

    Raises MeshImportError if the file cannot be opened or yields no mesh.
    """
    logger = get_logger()
    logger.info("Importing COMSOL mesh from file: ", filename)
    try:
        with open(filename, encoding="utf-8", errors="replace") as handle:
            lines = handle.read().splitlines()
    except OSError as exc:
        logger.error("Failed to open mesh file: ", filename)
        raise MeshImportError(f"Failed to open mesh file: {filename}") from exc

    mesh = Mesh()
    logger.info("Pass 1: Reading mesh vertices...")
    _read_vertices(iter(lines), mesh)
    logger.info("Pass 2: Reading triangle elements...")
    _read_triangles(iter(lines), mesh)

    logger.info(
        "Import finished. Total: ", len(mesh.nodes), " nodes, ", len(mesh.elements), " elements."
    )
    if not mesh.nodes or not mesh.elements:
        message = (
            "The importer did not read any valid mesh data. "
            "Please check the .mphtxt file format and content."
        )
        logger.error(message)
        raise MeshImportError(message)
    return mesh