import logging
import typing

import numpy as np

from splineiges import SplineSurfaceError
from splineiges.iges.surfaces import RationalBSplineSurfaceIGES
from splineiges.utils.read_write_files import save_data, load_data

logger = logging.getLogger(__name__)


def _as_array(value, name: str) -> np.ndarray:
    try:
        return np.array(value, dtype=float)
    except (TypeError, ValueError) as e:
        raise SplineSurfaceError(f"{name} is not a rectangular array of numbers: {e}", field=name) from e


class SplineSurface:

    def __init__(self, pu: int, pv: int, u: np.ndarray, v: np.ndarray, px: np.ndarray, py: np.ndarray,
                 pz: np.ndarray, rx: np.ndarray or None = None, ry: np.ndarray or None = None,
                 rz: np.ndarray or None = None):
        r"""
        Tensor-product B-spline surface

        .. math::

            \mathbf{S}(u,v)=\sum_{j=0}^{n_v-1} \sum_{i=0}^{n_u-1} N_{i,p_u}(u) N_{j,p_v}(v) \mathbf{P}_{j,i}

        as produced by a surface fit. The control points are stored twice: in the reference coordinates the fit was
        carried out in, and in real-world coordinates (which are the ones written to IGES files).

        Parameters
        ==========
        pu, pv: int
            Polynomial degree in the :math:`u` and :math:`v` directions

        u, v: np.ndarray
            Knot vectors. The number of control points in each direction follows from the knot vector lengths:
            :math:`n_u = \text{len}(u) - p_u - 1` and :math:`n_v = \text{len}(v) - p_v - 1`.

        px, py, pz: np.ndarray
            Reference control point coordinates, each of ``shape=(n_v, n_u)``

        rx, ry, rz: np.ndarray or None
            Real-world control point coordinates, each of ``shape=(n_v, n_u)``. Each defaults to a copy of the
            matching reference array.
        """
        self.pu = pu
        self.pv = pv
        self.u = _as_array(u, "u")
        self.v = _as_array(v, "v")
        self.px = _as_array(px, "px")
        self.py = _as_array(py, "py")
        self.pz = _as_array(pz, "pz")
        self.rx = self.px.copy() if rx is None else _as_array(rx, "rx")
        self.ry = self.py.copy() if ry is None else _as_array(ry, "ry")
        self.rz = self.pz.copy() if rz is None else _as_array(rz, "rz")
        self.check_invariant()

    @property
    def nu(self) -> int:
        return len(self.u) - self.pu - 1

    @property
    def nv(self) -> int:
        return len(self.v) - self.pv - 1

    def check_invariant(self):
        """Raises a ``SplineSurfaceError`` if the degrees, knot vectors, and control point grids are inconsistent"""
        for name, degree in (("pu", self.pu), ("pv", self.pv)):
            if isinstance(degree, bool) or not isinstance(degree, (int, np.integer)) or degree < 0:
                raise SplineSurfaceError(f"Invalid polynomial degree, {name} = {degree}", field=name, value=degree)

        for name, knots in (("u", self.u), ("v", self.v)):
            if knots.ndim != 1:
                raise SplineSurfaceError(f"Knot vector {name} must be one-dimensional", field=name,
                                         value=knots.shape)
            out_of_order = np.flatnonzero(~(knots[1:] >= knots[:-1]))
            if len(out_of_order) > 0:
                idx = int(out_of_order[0]) + 1
                raise SplineSurfaceError(f"Out-of-order knot value {name}[{idx}] = {knots[idx]}",
                                         field=f"{name}[{idx}]", value=float(knots[idx]))

        for name, count in (("nu", self.nu), ("nv", self.nv)):
            if count < 1:
                raise SplineSurfaceError(f"Invalid number of control points, {name} = {count}", field=name,
                                         value=count)

        for name, grid in self.grids().items():
            if grid.shape != (self.nv, self.nu):
                raise SplineSurfaceError(f"Incorrect shape for control point array {name}: expected "
                                         f"{(self.nv, self.nu)}, got {grid.shape}", field=name, value=grid.shape)

    def grids(self) -> typing.Dict[str, np.ndarray]:
        return {"px": self.px, "py": self.py, "pz": self.pz, "rx": self.rx, "ry": self.ry, "rz": self.rz}

    @staticmethod
    def _bbox(x: np.ndarray, y: np.ndarray, z: np.ndarray) -> typing.Tuple[np.ndarray, np.ndarray]:
        lo = np.array([x.min(), y.min(), z.min()])
        hi = np.array([x.max(), y.max(), z.max()])
        return lo, hi

    def ref_bbox(self) -> typing.Tuple[np.ndarray, np.ndarray]:
        """
        Bounding box of the reference control points

        Returns
        =======
        typing.Tuple[np.ndarray, np.ndarray]
            Lower and upper limits of the :math:`x`, :math:`y`, and :math:`z` coordinates
        """
        return self._bbox(self.px, self.py, self.pz)

    def rw_bbox(self) -> typing.Tuple[np.ndarray, np.ndarray]:
        """Bounding box of the real-world control points, as lower and upper limits"""
        return self._bbox(self.rx, self.ry, self.rz)

    @staticmethod
    def span_from_bbox(lo: np.ndarray, hi: np.ndarray) -> typing.Tuple[float, float]:
        """
        Computes the size of a bounding box.

        Returns
        =======
        typing.Tuple[float, float]
            The largest absolute coordinate value and the largest extent along any axis
        """
        lo = np.asarray(lo, dtype=float)
        hi = np.asarray(hi, dtype=float)
        max_abs = float(max(np.max(np.abs(lo)), np.max(np.abs(hi)), 0.0))
        max_span = float(max(np.max(np.abs(hi - lo)), 0.0))
        return max_abs, max_span

    def to_dict(self) -> dict:
        self.check_invariant()
        return {
            "Px": self.px.tolist(),
            "Py": self.py.tolist(),
            "Pz": self.pz.tolist(),
            "real_world_Px": self.rx.tolist(),
            "real_world_Py": self.ry.tolist(),
            "real_world_Pz": self.rz.tolist(),
            "U": self.u.tolist(),
            "V": self.v.tolist(),
            "pu": int(self.pu),
            "pv": int(self.pv),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SplineSurface":
        missing = [key for key in ("Px", "Py", "Pz", "U", "V", "pu", "pv") if key not in data]
        if missing:
            raise SplineSurfaceError(f"Spline surface data is missing the keys {missing}", field=missing[0])
        return cls(pu=data["pu"], pv=data["pv"], u=data["U"], v=data["V"], px=data["Px"], py=data["Py"],
                   pz=data["Pz"], rx=data.get("real_world_Px"), ry=data.get("real_world_Py"),
                   rz=data.get("real_world_Pz"))

    def save(self, file_name: str):
        """Saves the surface to a JSON file"""
        save_data(self.to_dict(), file_name)

    @classmethod
    def load(cls, file_name: str) -> "SplineSurface":
        """Loads a surface from a JSON file written by ``save``"""
        logger.info(f"Reading spline file: {file_name}")
        return cls.from_dict(load_data(file_name))

    def to_iges_entity(self, label: str = "", **dir_entry_kwargs) -> RationalBSplineSurfaceIGES:
        """
        Converts the real-world surface into an IGES rational B-spline surface entity with unit weights, spanning
        the active knot range in both directions. The first IGES parametric direction runs along ``v`` and the second
        along ``u``, so the control grids are transposed to ``shape=(n_u, n_v)``.

        Parameters
        ==========
        label: str
            Entity label, at most 8 characters

        dir_entry_kwargs
            Directory entry fields overriding the defaults (see ``splineiges.iges.entity.dir_entry_param_list``)

        Returns
        =======
        RationalBSplineSurfaceIGES
            The IGES entity
        """
        self.check_invariant()
        dir_entry = dict(line_font=0, level=0, view=0, transform=0, label_assoc=0, color=0)
        dir_entry.update(dir_entry_kwargs)
        return RationalBSplineSurfaceIGES(
            knots_u=self.v, knots_v=self.u,
            control_points_XYZ=np.stack((self.rx, self.ry, self.rz), axis=-1).transpose(1, 0, 2),
            degree_u=self.pv, degree_v=self.pu,
            label=label, **dir_entry,
        )

    def __repr__(self):
        return f"SplineSurface(pu={self.pu}, pv={self.pv}, nu={self.nu}, nv={self.nv})"
