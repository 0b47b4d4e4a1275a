"""Nodes, line and triangle elements, and meshes built from them."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .logger import get_logger


@dataclass(eq=False)
class Node:
    """A mesh node with an id and 3D coordinates."""

    id: int
    x: float
    y: float = 0.0
    z: float = 0.0

    @property
    def coords(self) -> tuple:
        return (self.x, self.y, self.z)


class Element(ABC):
    """Base class for elements: an id and an ordered list of nodes."""

    def __init__(self, element_id: int) -> None:
        self.id = element_id
        self.nodes: List[Node] = []

    def add_node(self, node: Node) -> None:
        self.nodes.append(node)

    @abstractmethod
    def num_nodes(self) -> int:
        """Number of nodes this element type has."""

    @abstractmethod
    def type_name(self) -> str:
        """Name of the element type."""


class LineElement(Element):
    """Two-node 1D line element."""

    def num_nodes(self) -> int:
        return 2

    def type_name(self) -> str:
        return "LineElement"

    def length(self) -> float:
        if len(self.nodes) != 2:
            raise ValueError("LineElement must have exactly 2 nodes to calculate length.")
        p1, p2 = (n.coords for n in self.nodes)
        return math.dist(p1, p2)


class TriElement(Element):
    """Three-node linear triangular element."""

    def num_nodes(self) -> int:
        return 3

    def type_name(self) -> str:
        return "TriElement"

    def _corners(self, purpose: str):
        if len(self.nodes) != 3:
            raise ValueError(f"TriElement must have exactly 3 nodes to calculate {purpose}.")
        return [n.coords for n in self.nodes]

    def area(self) -> float:
        (x1, y1, _), (x2, y2, _), (x3, y3, _) = self._corners("area")
        return 0.5 * abs(x1 * (y2 - y3) + x2 * (y3 - y1) + x3 * (y1 - y2))

    def b_matrix(self) -> np.ndarray:
        """2x3 matrix mapping nodal values to the in-plane gradient."""
        (x1, y1, _), (x2, y2, _), (x3, y3, _) = self._corners("B-matrix")
        area = self.area()
        if area < 1e-12:
            raise ValueError(f"Element {self.id} has zero or negative area.")
        b = np.array(
            [
                [y2 - y3, y3 - y1, y1 - y2],
                [x3 - x2, x1 - x3, x2 - x1],
            ],
            dtype=float,
        )
        return b / (2.0 * area)


class Mesh:
    """A collection of nodes and elements, looked up by id."""

    def __init__(self) -> None:
        self.nodes: List[Node] = []
        self.elements: List[Element] = []
        self._node_map: Dict[int, Node] = {}
        self._element_map: Dict[int, Element] = {}

    def add_node(self, node: Node) -> None:
        self.nodes.append(node)
        self._node_map[node.id] = node

    def add_element(self, element: Element) -> None:
        self.elements.append(element)
        self._element_map[element.id] = element

    def node(self, node_id: int) -> Optional[Node]:
        return self._node_map.get(node_id)

    def element(self, element_id: int) -> Optional[Element]:
        return self._element_map.get(element_id)


def create_uniform_1d_mesh(length: float, num_elements: int) -> Mesh:
    """Evenly spaced line elements along x from 0 to ``length``."""
    logger = get_logger()
    logger.info("Creating uniform 1D mesh...")
    mesh = Mesh()
    h = length / num_elements
    for i in range(num_elements + 1):
        mesh.add_node(Node(i, i * h))
    for i in range(num_elements):
        elem = LineElement(i)
        elem.add_node(mesh.node(i))
        elem.add_node(mesh.node(i + 1))
        mesh.add_element(elem)
    logger.info("Created ", len(mesh.nodes), " nodes and ", len(mesh.elements), " elements.")
    return mesh


def create_uniform_2d_mesh(width: float, height: float, nx: int, ny: int) -> Mesh:
    """Rectangle split into nx*ny quads, each cut into two triangles."""
    logger = get_logger()
    logger.info("Creating uniform 2D mesh...")
    mesh = Mesh()
    dx = width / nx
    dy = height / ny

    node_id = 0
    for j in range(ny + 1):
        for i in range(nx + 1):
            mesh.add_node(Node(node_id, i * dx, j * dy))
            node_id += 1

    elem_id = 0
    for j in range(ny):
        for i in range(nx):
            n0 = j * (nx + 1) + i
            n1 = n0 + 1
            n2 = (j + 1) * (nx + 1) + i
            n3 = n2 + 1
            for corners in ((n0, n1, n2), (n1, n3, n2)):
                tri = TriElement(elem_id)
                elem_id += 1
                for n in corners:
                    tri.add_node(mesh.node(n))
                mesh.add_element(tri)

    logger.info("Created ", len(mesh.nodes), " nodes and ", len(mesh.elements), " elements.")
    return mesh