import math

import pytest

from multiphysfem.boundary import CauchyBC, DirichletBC, NeumannBC
from multiphysfem.emag import EMag1D, EMag2D
from multiphysfem.heat import Heat1D, Heat2D
from multiphysfem.material import Material
from multiphysfem.mesh import create_uniform_1d_mesh, create_uniform_2d_mesh
from multiphysfem.problem import Problem

SIGMA_PARAMS = {"sigma_ref": 5.96e7, "alpha": 0.0039, "T_ref": 293.15}


def _thermal(name, k, rho, cp):
    mat = Material(name)
    mat.set_property("thermal_conductivity", k)
    mat.set_property("density", rho)
    mat.set_property("specific_heat", cp)
    return mat


def _copper(temperature_dependent=False):
    mat = _thermal("Copper", 401.0, 8960.0, 385.0)
    if temperature_dependent:
        mat.set_temperature_dependent("electrical_conductivity", SIGMA_PARAMS)
    else:
        mat.set_property("electrical_conductivity", 5.96e7)
    return mat


def _problem(mesh, *fields):
    problem = Problem(mesh)
    for field in fields:
        problem.add_field(field)
    problem.setup()
    return problem


def _on_rect_boundary(node, width, height, tol=1e-9):
    return (
        abs(node.x) < tol
        or abs(node.x - width) < tol
        or abs(node.y) < tol
        or abs(node.y - height) < tol
    )


def _value(problem, field, node_id, var):
    return field.solution[problem.dof_manager.equation_index(node_id, var)]


def test_cauchy_convection_matches_analytical():
    length, n = 2.0, 40
    aluminum = _thermal("Aluminum", 237.0, 2700.0, 900.0)
    problem = _problem(create_uniform_1d_mesh(length, n), Heat1D(aluminum))
    heat = problem.field("Temperature")
    t_fixed, t_ambient, h_conv = 400.0, 293.15, 15.0
    heat.add_bc(DirichletBC(problem.dof_manager, 0, "Temperature", t_fixed))
    heat.add_bc(CauchyBC(problem.dof_manager, n, "Temperature", h_conv, t_ambient))

    problem.solve_steady_state()

    k = aluminum.get("thermal_conductivity")
    c1 = (h_conv * (t_ambient - t_fixed)) / (h_conv * length + k)
    for i in range(n + 1):
        x = problem.mesh.node(i).x
        assert _value(problem, heat, i, "Temperature") == pytest.approx(c1 * x + t_fixed, abs=1e-9)


def test_neumann_flux_matches_analytical():
    length, n = 2.0, 40
    steel = _thermal("Steel", 50.0, 7850.0, 462.0)
    problem = _problem(create_uniform_1d_mesh(length, n), Heat1D(steel))
    heat = problem.field("Temperature")
    t_fixed, flux_out = 373.15, 1000.0
    heat.add_bc(DirichletBC(problem.dof_manager, 0, "Temperature", t_fixed))
    heat.add_bc(NeumannBC(problem.dof_manager, n, "Temperature", -flux_out))

    problem.solve_steady_state()

    k = steel.get("thermal_conductivity")
    for i in range(n + 1):
        x = problem.mesh.node(i).x
        expected = t_fixed - (flux_out / k) * x
        assert _value(problem, heat, i, "Temperature") == pytest.approx(expected, abs=1e-9)


def test_heat_2d_square_plate_stays_within_boundary_values():
    size, div = 1.0, 10
    problem = _problem(
        create_uniform_2d_mesh(size, size, div, div), Heat2D(_thermal("Copper", 401.0, 8960.0, 385.0))
    )
    heat = problem.field("Temperature")
    t_hot, t_cold = 500.0, 300.0
    for node in problem.mesh.nodes:
        if abs(node.y - size) < 1e-9:
            heat.add_bc(DirichletBC(problem.dof_manager, node.id, "Temperature", t_hot))
        elif abs(node.x) < 1e-9 or abs(node.x - size) < 1e-9 or abs(node.y) < 1e-9:
            heat.add_bc(DirichletBC(problem.dof_manager, node.id, "Temperature", t_cold))

    problem.solve_steady_state()

    assert heat.solution.max() <= t_hot + 1e-9
    assert heat.solution.min() >= t_cold - 1e-9


def test_emag_2d_linear_voltage_drop():
    width, height = 2.0, 1.0
    copper = Material("Copper")
    copper.set_property("electrical_conductivity", 5.96e7)
    problem = _problem(create_uniform_2d_mesh(width, height, 20, 10), EMag2D(copper))
    emag = problem.field("Voltage")
    v_high, v_low = 5.0, 1.0
    for node in problem.mesh.nodes:
        if abs(node.x) < 1e-9:
            emag.add_bc(DirichletBC(problem.dof_manager, node.id, "Voltage", v_high))
        elif abs(node.x - width) < 1e-9:
            emag.add_bc(DirichletBC(problem.dof_manager, node.id, "Voltage", v_low))

    problem.solve_steady_state()

    for node in problem.mesh.nodes:
        expected = v_high - (v_high - v_low) * (node.x / width)
        assert _value(problem, emag, node.id, "Voltage") == pytest.approx(expected, abs=1e-9)


def test_coupled_2d_joule_heating_raises_temperature(tmp_path):
    width, height = 0.02, 0.01
    copper = _copper()
    problem = _problem(
        create_uniform_2d_mesh(width, height, 20, 10), EMag2D(copper), Heat2D(copper)
    )
    emag = problem.field("Voltage")
    heat = problem.field("Temperature")
    t_boundary = 300.0
    for node in problem.mesh.nodes:
        if abs(node.x) < 1e-9:
            emag.add_bc(DirichletBC(problem.dof_manager, node.id, "Voltage", 1.0))
        elif abs(node.x - width) < 1e-9:
            emag.add_bc(DirichletBC(problem.dof_manager, node.id, "Voltage", 0.0))
        if _on_rect_boundary(node, width, height):
            heat.add_bc(DirichletBC(problem.dof_manager, node.id, "Temperature", t_boundary))

    problem.solve_steady_state()
    out = tmp_path / "coupled.vtk"
    problem.export_results(str(out))

    assert heat.solution.max() > t_boundary
    text = out.read_text()
    assert "SCALARS Voltage double 1" in text
    assert "SCALARS Temperature double 1" in text


def test_transient_1d_converges_to_steady_state():
    length, n = 1.0, 20
    steel = _thermal("Steel", 50.2, 7850.0, 462.0)
    problem = _problem(create_uniform_1d_mesh(length, n), Heat1D(steel))
    heat = problem.field("Temperature")
    problem.set_time_stepping(50.0, 100000.0)
    heat.set_initial_conditions(0.0)
    heat.add_bc(DirichletBC(problem.dof_manager, 0, "Temperature", 100.0))
    heat.add_bc(DirichletBC(problem.dof_manager, n, "Temperature", 0.0))

    problem.solve_transient()

    for i in range(n + 1):
        x = problem.mesh.node(i).x
        expected = 100.0 * (1.0 - x / length)
        assert _value(problem, heat, i, "Temperature") == pytest.approx(expected, abs=1e-2)


def test_transient_2d_plate_cooling():
    size, div = 1.0, 10
    aluminum = _thermal("Aluminum", 237.0, 2700.0, 900.0)
    problem = _problem(create_uniform_2d_mesh(size, size, div, div), Heat2D(aluminum))
    heat = problem.field("Temperature")
    t_initial, t_boundary = 600.0, 300.0
    problem.set_time_stepping(0.1, 5.0)
    heat.set_initial_conditions(t_initial)
    for node in problem.mesh.nodes:
        if _on_rect_boundary(node, size, size):
            heat.add_bc(DirichletBC(problem.dof_manager, node.id, "Temperature", t_boundary))

    problem.solve_transient()

    center = min(
        problem.mesh.nodes,
        key=lambda node: math.dist((node.x, node.y), (size / 2.0, size / 2.0)),
    )
    center_temp = _value(problem, heat, center.id, "Temperature")
    assert t_boundary < center_temp < t_initial


def test_transient_coupled_1d_rod_heats_up():
    n = 10
    copper = _copper(temperature_dependent=True)
    problem = _problem(create_uniform_1d_mesh(0.1, n), EMag1D(copper), Heat1D(copper))
    heat = problem.field("Temperature")
    emag = problem.field("Voltage")
    t_initial, v_high = 300.0, 0.5
    problem.set_time_stepping(0.1, 1.0)
    heat.set_initial_conditions(t_initial)
    dofs = problem.dof_manager
    heat.add_bc(DirichletBC(dofs, 0, "Temperature", t_initial))
    heat.add_bc(DirichletBC(dofs, n, "Temperature", t_initial))
    emag.add_bc(DirichletBC(dofs, 0, "Voltage", v_high))
    emag.add_bc(DirichletBC(dofs, n, "Voltage", 0.0))

    problem.solve_transient()

    assert heat.solution.max() > t_initial
    assert emag.heat_field is heat


def test_transient_coupled_2d_internal_heating():
    width, height = 0.02, 0.01
    copper = _copper(temperature_dependent=True)
    problem = _problem(
        create_uniform_2d_mesh(width, height, 10, 5), EMag2D(copper), Heat2D(copper)
    )
    heat = problem.field("Temperature")
    emag = problem.field("Voltage")
    t_initial, v_high = 300.0, 0.5
    problem.set_time_stepping(0.2, 1.0)
    heat.set_initial_conditions(t_initial)
    for node in problem.mesh.nodes:
        if _on_rect_boundary(node, width, height):
            heat.add_bc(DirichletBC(problem.dof_manager, node.id, "Temperature", t_initial))
        if abs(node.x) < 1e-9:
            emag.add_bc(DirichletBC(problem.dof_manager, node.id, "Voltage", v_high))
        elif abs(node.x - width) < 1e-9:
            emag.add_bc(DirichletBC(problem.dof_manager, node.id, "Voltage", 0.0))

    problem.solve_transient()

    assert heat.solution.max() > t_initial


def test_field_lookup_by_variable_name():
    copper = _copper()
    emag = EMag1D(copper)
    heat = Heat1D(copper)
    problem = Problem(create_uniform_1d_mesh(1.0, 4))
    problem.add_field(emag)
    problem.add_field(heat)
    assert problem.field("Voltage") is emag
    assert problem.field("Temperature") is heat
    assert problem.field("Pressure") is None
    assert problem.dof_manager.variable_names == ["Voltage", "Temperature"]


def test_setup_numbers_all_dofs():
    copper = _copper()
    problem = _problem(create_uniform_1d_mesh(1.0, 4), EMag1D(copper), Heat1D(copper))
    assert problem.dof_manager.num_equations() == 10
    assert problem.field("Temperature").solution.shape == (10,)


def test_transient_rejects_unsupported_field_combination():
    mat = _thermal("Steel", 50.0, 7850.0, 462.0)
    problem = Problem(create_uniform_1d_mesh(1.0, 4))
    problem.add_field(Heat1D(mat))
    problem.add_field(Heat1D(mat))
    with pytest.raises(ValueError):
        problem.solve_transient()