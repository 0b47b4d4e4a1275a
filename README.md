# multiphysfem

A compact finite element solver for heat conduction, electric conduction and
their one-way coupling through Joule heating, on 1D line meshes and 2D linear
triangle meshes. Systems are assembled as SciPy sparse matrices and solved with
a sparse LU factorisation.

## What it provides

- `multiphysfem.mesh`: `Node`, `LineElement`, `TriElement`, `Mesh`, and the
  generators `create_uniform_1d_mesh(length, num_elements)` and
  `create_uniform_2d_mesh(width, height, nx, ny)` (each rectangle cell is split
  into two triangles)
- `multiphysfem.importer`: `read_comsol_mphtxt(filename)` reads the vertices and
  linear triangles of a COMSOL `.mphtxt` text mesh; it raises
  `MeshImportError` if the file cannot be opened or holds no usable mesh
- `multiphysfem.material`: `Material` with constant properties
  (`set_property`) or temperature-dependent ones (`set_temperature_dependent`).
  The only temperature model is the linear one for `electrical_conductivity`,
  with parameters `sigma_ref`, `alpha` and `T_ref`:
  `sigma_ref * (1 + alpha * (T - T_ref))`. Problems raise `MaterialError`.
- `multiphysfem.heat`: `Heat1D` and `Heat2D` (variable `Temperature`), which
  need the properties `thermal_conductivity`, `density` and `specific_heat`
- `multiphysfem.emag`: `EMag1D` and `EMag2D` (variable `Voltage`), which need
  `electrical_conductivity`, and compute per-element Joule heat with
  `joule_heat()`
- `multiphysfem.boundary`: `DirichletBC` (fixed value), `NeumannBC` (nodal
  flux added to the right-hand side, positive into the domain) and `CauchyBC`
  (convection, `h * (T_inf - T)`)
- `multiphysfem.problem`: `Problem`, which numbers the degrees of freedom,
  sets up fields and runs steady-state or backward-Euler transient solves
- `multiphysfem.exporter`: `write_vtk(filename, problem)` writes the mesh and
  every solved nodal field as a legacy ASCII VTK unstructured grid
- `multiphysfem.linear_solver`: `solve(A, b)`, raising `SolverError` when the
  system cannot be factorised or solved

## Installation

```
pip install .
```

## Example: 1D rod with a fixed end and convection

```python
from multiphysfem.mesh import create_uniform_1d_mesh
from multiphysfem.material import Material
from multiphysfem.problem import Problem
from multiphysfem.heat import Heat1D
from multiphysfem.boundary import DirichletBC, CauchyBC

aluminium = Material("Aluminium")
aluminium.set_property("thermal_conductivity", 237.0)
aluminium.set_property("density", 2700.0)
aluminium.set_property("specific_heat", 900.0)

problem = Problem(create_uniform_1d_mesh(2.0, 40))
problem.add_field(Heat1D(aluminium))
problem.setup()

heat = problem.field("Temperature")
dofs = problem.dof_manager
heat.add_bc(DirichletBC(dofs, 0, "Temperature", 400.0))
heat.add_bc(CauchyBC(dofs, 40, "Temperature", 15.0, 293.15))

problem.solve_steady_state()
print(heat.solution)
problem.export_results("rod.vtk")
```

## Coupled electro-thermal problems

Add a `Voltage` field and a `Temperature` field to the same problem.

- `solve_steady_state()` couples them only when they are `EMag2D` and
  `Heat2D`: the voltage is solved with conductivity taken at 300 K, its Joule
  heat becomes the heat source, then the temperature is solved. Any other
  combination is solved field by field without coupling.
- `solve_transient()` couples any `Voltage`/`Temperature` pair: at each step
  the voltage is solved with conductivity evaluated at the current element
  temperatures, its Joule heat is passed to the heat field, and the heat field
  takes one backward-Euler step.

For a steady 1D coupled problem, chain the steps yourself:

```python
from multiphysfem.linear_solver import solve

emag = problem.field("Voltage")
heat = problem.field("Temperature")

emag.assemble()
emag.apply_bcs()
emag.solution = solve(emag.stiffness, emag.rhs)

heat.set_volumetric_heat_source(emag.joule_heat())
heat.assemble()
heat.apply_bcs()
heat.solution = solve(heat.stiffness, heat.rhs)
```

## Transient problems

```python
problem.set_time_stepping(0.1, 5.0)   # time step, total time
heat.set_initial_conditions(600.0)
problem.solve_transient()
```

The number of steps is `int(total_time / time_step)`. A transient solve
accepts either a single field or a `Voltage`/`Temperature` pair; anything else
raises `ValueError`. `set_initial_conditions` raises `RuntimeError` before
`setup()`.

## Command line

The `multiphysfem` command solves steady-state conduction in a copper disc of
radius 1 read from a COMSOL mesh: convection to 293.15 K on the rim (nodes at
distance 1 from the origin) and a 10 W point source at the node nearest to
(0, 1).

```
multiphysfem [MESH] [-o OUTPUT] [--log-file LOG_FILE]
```

By default it reads `circle_mesh.mphtxt`, writes
`comsol_circle_steadystate_results.vtk`, and appends its log to
`femsolver.log`. It exits with status 1 when the solve fails. When the mesh
cannot be imported it logs the error and exits with status 0. The same run is
available from Python as `multiphysfem.cli.run_circle_steady_state(mesh_filename,
output_filename)`.

## Logging

All components report progress through a shared logger that writes coloured
level tags to standard output and, optionally, plain lines to a file:

```python
from multiphysfem.logger import get_logger, LogLevel

log = get_logger()
log.set_level(LogLevel.WARN)
log.set_logfile("run.log")
```

## What it does not do

- No nonlinear iteration: `set_iterative_solver_parameters` stores its values
  but no solver uses them, and steady coupling is one pass only.
- No 3D elements and no higher-order elements; the VTK writer and the importer
  handle line and linear triangle meshes only.
- Neumann and Cauchy conditions are nodal values, not integrated over edges.

## Running the tests

```
pip install .[test]
pytest
```