import numpy as np

from splineiges import IGESRangeError, IGESShapeError, IGESOrderError, IGESWeightError, IGESEnumerationError
from splineiges.iges import ETYPE_B_SPLINE_SURFACE
from splineiges.iges.entity import Entity, dir_entry_param_list
from splineiges.iges.param_list import IGESParamList

bspline_surface_forms = {
    "data": 0,
    "plane": 1,
    "right_circular_cylinder": 2,
    "cone": 3,
    "sphere": 4,
    "torus": 5,
    "surface_of_revolution": 6,
    "tabulated_cylinder": 7,
    "ruled_surface": 8,
    "general_quadric_surface": 9,
}


def _check_knots(knots, k: int, m: int, name: str) -> np.ndarray:
    knots = np.asarray(knots, dtype=float)
    if knots.ndim != 1 or len(knots) != k + m + 2:
        raise IGESShapeError(f"Bad length for knots {name}: {knots.shape}, expecting {k + m + 2}",
                             field=name, value=knots.shape)
    out_of_order = np.flatnonzero(~(knots[1:] >= knots[:-1]))
    if len(out_of_order) > 0:
        idx = int(out_of_order[0]) + 1
        raise IGESOrderError(f"Out-of-order knot {name}[{idx}]: {knots[idx]}", field=f"{name}[{idx}]",
                             value=float(knots[idx]))
    return knots


def _check_grid(grid, k1: int, k2: int, name: str) -> np.ndarray:
    try:
        grid = np.asarray(grid, dtype=float)
    except ValueError as e:
        raise IGESShapeError(f"{name} is not a rectangular grid of numbers: {e}", field=name) from e
    if grid.shape != (k2 + 1, k1 + 1):
        raise IGESShapeError(f"Bad shape for {name}: {grid.shape}, expecting {(k2 + 1, k1 + 1)}",
                             field=name, value=grid.shape)
    return grid


def _check_parameter_range(knots: np.ndarray, k: int, m: int, low: float, high: float, name: str):
    if not (knots[m] <= low < high <= knots[k + 1]):
        raise IGESOrderError(f"Invalid parameter range {name}: ({low}, {high}), valid range "
                             f"({knots[m]}, {knots[k + 1]})", field=name, value=(low, high))


def bspline_surface_param_list(k1: int, k2: int, m1: int, m2: int, knots1, knots2, x, y, z, u0: float, u1: float,
                               v0: float, v1: float, weights=None, closed1: bool = False, closed2: bool = False,
                               periodic1: bool = False, periodic2: bool = False) -> IGESParamList:
    r"""
    Builds the parameter data for a rational B-spline surface (entity 128). All inputs are validated before any value
    is added.

    Index 1 refers to the first parametric direction (:math:`u`, along the columns of the grids) and index 2 to the
    second (:math:`v`, along the rows of the grids). The first and last :math:`M` knots of each direction are
    inactive: the active span in direction 1 is ``knots1[m1]`` to ``knots1[k1 + 1]``.

    Parameters
    ==========
    k1, k2: int
        Number of control points minus one in each direction

    m1, m2: int
        Polynomial degree in each direction

    knots1, knots2: np.ndarray
        Non-decreasing knot vectors of lengths ``k1 + m1 + 2`` and ``k2 + m2 + 2``

    x, y, z: np.ndarray
        Control point coordinates, each of ``shape=(k2 + 1, k1 + 1)``

    u0, u1, v0, v1: float
        Parameter ranges, within the active span of each direction and with ``u0 < u1`` and ``v0 < v1``

    weights: np.ndarray or None
        Strictly positive weights of ``shape=(k2 + 1, k1 + 1)``, or ``None`` for unit weights

    closed1, closed2, periodic1, periodic2: bool
        Closed and periodic flags for each direction

    Returns
    =======
    IGESParamList
        The parameter data, beginning with the entity type
    """
    for name, value in (("k1", k1), ("k2", k2), ("m1", m1), ("m2", m2)):
        if value < 0:
            raise IGESRangeError(f"{name} must be non-negative. Found {value}.", field=name, value=value)

    knots1 = _check_knots(knots1, k1, m1, "knots1")
    knots2 = _check_knots(knots2, k2, m2, "knots2")
    x = _check_grid(x, k1, k2, "x")
    y = _check_grid(y, k1, k2, "y")
    z = _check_grid(z, k1, k2, "z")

    if weights is None:
        weights = np.ones((k2 + 1, k1 + 1))
        polynomial = True
    else:
        weights = _check_grid(weights, k1, k2, "weights")
        non_positive = np.argwhere(~(weights > 0.0))
        if len(non_positive) > 0:
            i2, i1 = (int(i) for i in non_positive[0])
            raise IGESWeightError(f"Non-positive weight weights[{i2}][{i1}]: {weights[i2, i1]}",
                                  field=f"weights[{i2}][{i1}]", value=float(weights[i2, i1]))
        # Exact equality scan against the first weight, not a test of whether the surface is truly rational
        polynomial = bool(np.all(weights == weights[0, 0]))

    _check_parameter_range(knots1, k1, m1, u0, u1, "(u0, u1)")
    _check_parameter_range(knots2, k2, m2, v0, v1, "(v0, v1)")

    pd = IGESParamList()
    pd.add_integer(ETYPE_B_SPLINE_SURFACE)
    pd.add_integer(k1)
    pd.add_integer(k2)
    pd.add_integer(m1)
    pd.add_integer(m2)
    pd.add_boolean(closed1)
    pd.add_boolean(closed2)
    pd.add_boolean(polynomial)
    pd.add_boolean(periodic1)
    pd.add_boolean(periodic2)
    pd.add_double_array(knots1)
    pd.add_double_array(knots2)
    pd.add_double_grid(weights)
    pd.add_double_array(np.stack((x, y, z), axis=-1).reshape(-1))  # x, y, z of each control point in turn
    pd.add_double(u0)
    pd.add_double(u1)
    pd.add_double(v0)
    pd.add_double(v1)
    return pd


class RationalBSplineSurfaceIGES(Entity):
    """
    IGES Entity #128
    """
    def __init__(self, knots_u: np.ndarray, knots_v: np.ndarray, control_points_XYZ: np.ndarray, degree_u: int,
                 degree_v: int, weights: np.ndarray or None = None, u_range: tuple or None = None,
                 v_range: tuple or None = None, closed_u: bool = False, closed_v: bool = False,
                 periodic_u: bool = False, periodic_v: bool = False, form: int or str = 0, label: str = "",
                 **dir_entry_kwargs):
        """
        Parameters
        ==========
        knots_u, knots_v: np.ndarray
            Knot vectors in each direction

        control_points_XYZ: np.ndarray
            Control points, ``shape=(n_v, n_u, 3)``, where ``n_u = len(knots_u) - degree_u - 1`` and
            ``n_v = len(knots_v) - degree_v - 1``. Row ``j`` holds the control points with :math:`v`-index ``j``.

        degree_u, degree_v: int
            Polynomial degree in each direction

        weights: np.ndarray or None
            Weights of ``shape=(n_v, n_u)``, or ``None`` for a polynomial (non-rational) surface

        u_range, v_range: tuple or None
            ``(start, end)`` parameter values in each direction. Default to the active knot span.

        form: int or str
            Surface form number, or one of the keys of ``bspline_surface_forms``

        label: str
            Entity label, at most 8 characters

        dir_entry_kwargs
            Additional directory entry fields, passed to ``dir_entry_param_list``
        """
        if isinstance(form, str):
            if form not in bspline_surface_forms:
                raise IGESEnumerationError(f"Invalid B-spline surface form: {form}", field="form", value=form)
            form = bspline_surface_forms[form]
        elif form not in bspline_surface_forms.values():
            raise IGESEnumerationError(f"Invalid B-spline surface form: {form}", field="form", value=form)

        control_points_XYZ = np.asarray(control_points_XYZ, dtype=float)
        if control_points_XYZ.ndim != 3 or control_points_XYZ.shape[2] != 3:
            raise IGESShapeError(f"Control points must have shape (n_v, n_u, 3). Found {control_points_XYZ.shape}.",
                                 field="control_points_XYZ", value=control_points_XYZ.shape)

        self.knots_u = np.asarray(knots_u, dtype=float)
        self.knots_v = np.asarray(knots_v, dtype=float)
        self.degree_u = degree_u
        self.degree_v = degree_v
        self.upper_index_u = len(self.knots_u) - degree_u - 2
        self.upper_index_v = len(self.knots_v) - degree_v - 2
        self.control_points = control_points_XYZ
        self.weights = weights

        if u_range is None and 0 <= degree_u < len(self.knots_u) and 0 <= self.upper_index_u + 1 < len(self.knots_u):
            u_range = (self.knots_u[degree_u], self.knots_u[self.upper_index_u + 1])
        if v_range is None and 0 <= degree_v < len(self.knots_v) and 0 <= self.upper_index_v + 1 < len(self.knots_v):
            v_range = (self.knots_v[degree_v], self.knots_v[self.upper_index_v + 1])
        if u_range is None or v_range is None:
            raise IGESShapeError("Knot vectors are too short for the given degrees", field="knots",
                                 value=(len(self.knots_u), len(self.knots_v)))
        self.u_range = tuple(float(u) for u in u_range)
        self.v_range = tuple(float(v) for v in v_range)

        parameter_data = bspline_surface_param_list(
            k1=self.upper_index_u, k2=self.upper_index_v, m1=degree_u, m2=degree_v,
            knots1=self.knots_u, knots2=self.knots_v,
            x=control_points_XYZ[:, :, 0], y=control_points_XYZ[:, :, 1], z=control_points_XYZ[:, :, 2],
            u0=self.u_range[0], u1=self.u_range[1], v0=self.v_range[0], v1=self.v_range[1],
            weights=weights, closed1=closed_u, closed2=closed_v, periodic1=periodic_u, periodic2=periodic_v,
        )
        dir_entry_data = dir_entry_param_list(form=form, label=label, **dir_entry_kwargs)
        super().__init__(ETYPE_B_SPLINE_SURFACE, parameter_data, dir_entry_data)
