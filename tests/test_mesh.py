import numpy as np
import pytest

from multiphysfem.mesh import (
    LineElement,
    Mesh,
    Node,
    TriElement,
    create_uniform_1d_mesh,
    create_uniform_2d_mesh,
)


def _tri(p1, p2, p3, element_id=0):
    tri = TriElement(element_id)
    for i, (x, y) in enumerate((p1, p2, p3)):
        tri.add_node(Node(i, x, y))
    return tri


def test_node_coords_default_to_zero():
    node = Node(4, 1.5)
    assert node.coords == (1.5, 0.0, 0.0)
    assert node.id == 4


def test_uniform_1d_mesh_counts_and_coords():
    mesh = create_uniform_1d_mesh(2.0, 40)
    assert len(mesh.nodes) == 41
    assert len(mesh.elements) == 40
    assert mesh.node(0).x == 0.0
    assert mesh.node(40).x == pytest.approx(2.0)


def test_1d_element_lengths_sum_to_length():
    mesh = create_uniform_1d_mesh(2.0, 40)
    total = sum(e.length() for e in mesh.elements)
    assert total == pytest.approx(2.0)
    assert all(e.type_name() == "LineElement" for e in mesh.elements)
    assert all(e.num_nodes() == 2 for e in mesh.elements)


def test_line_element_needs_two_nodes():
    elem = LineElement(0)
    elem.add_node(Node(0, 0.0))
    with pytest.raises(ValueError):
        elem.length()


def test_uniform_2d_mesh_counts():
    mesh = create_uniform_2d_mesh(0.02, 0.01, 20, 10)
    assert len(mesh.nodes) == 21 * 11
    assert len(mesh.elements) == 2 * 20 * 10
    assert all(e.type_name() == "TriElement" for e in mesh.elements)


def test_2d_areas_sum_to_rectangle():
    mesh = create_uniform_2d_mesh(0.5, 0.2, 2, 1)
    assert sum(e.area() for e in mesh.elements) == pytest.approx(0.5 * 0.2)


def test_b_matrix_reproduces_linear_gradient():
    mesh = create_uniform_2d_mesh(1.0, 1.0, 3, 3)
    for elem in mesh.elements:
        values = np.array([2.0 * n.x - 3.0 * n.y + 7.0 for n in elem.nodes])
        grad = elem.b_matrix() @ values
        assert grad == pytest.approx([2.0, -3.0])


def test_b_matrix_rows_sum_to_zero():
    tri = _tri((0.0, 0.0), (1.0, 0.0), (0.0, 1.0))
    assert tri.b_matrix().sum(axis=1) == pytest.approx([0.0, 0.0])


def test_degenerate_triangle_raises():
    tri = _tri((0.0, 0.0), (1.0, 1.0), (2.0, 2.0), element_id=9)
    assert tri.area() == 0.0
    with pytest.raises(ValueError, match="Element 9"):
        tri.b_matrix()


def test_triangle_needs_three_nodes():
    tri = TriElement(0)
    tri.add_node(Node(0, 0.0))
    with pytest.raises(ValueError):
        tri.area()


def test_mesh_lookup_by_id():
    mesh = Mesh()
    node = Node(10, 1.0)
    mesh.add_node(node)
    elem = LineElement(3)
    mesh.add_element(elem)
    assert mesh.node(10) is node
    assert mesh.element(3) is elem
    assert mesh.node(11) is None
    assert mesh.element(0) is None