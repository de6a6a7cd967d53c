"""
Sensor pose construction from calibration axis vectors.

Each sensor in the calibration is described by an origin plus an x-axis
and a y-axis expressed in the vehicle frame. The axes are not guaranteed
to be orthogonal, so the y-axis is reprojected before the basis is built.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from scipy.spatial.transform import Rotation as R

from .errors import BoundingBoxError, GeometryError, Outcome

EPSILON = 1e-8


def vector_is_valid(v: np.ndarray) -> bool:
    """A vector is valid if its norm is finite."""
    return bool(np.isfinite(np.linalg.norm(v)))


def axis_is_valid(axis: np.ndarray, epsilon: float = EPSILON) -> bool:
    return vector_is_valid(axis) and bool(np.linalg.norm(axis) > epsilon)


def _is_approx(a: np.ndarray, b: np.ndarray, epsilon: float) -> bool:
    # relative fuzzy equality: |a - b| <= eps * min(|a|, |b|)
    return bool(
        np.linalg.norm(a - b) <= epsilon * min(np.linalg.norm(a), np.linalg.norm(b))
    )


def _are_parallel(a: np.ndarray, b: np.ndarray, epsilon: float) -> bool:
    ua = a / np.linalg.norm(a)
    ub = b / np.linalg.norm(b)
    return bool(np.linalg.norm(np.cross(ua, ub)) <= epsilon)


def axes_are_valid(axis1, axis2, epsilon: float = EPSILON) -> bool:
    """
    Check that two axes can span a basis.

    Both axes must be finite with norm above epsilon, and they must be
    neither approximately equal nor (anti)parallel.
    """
    axis1 = np.asarray(axis1, dtype=np.float64)
    axis2 = np.asarray(axis2, dtype=np.float64)
    if not (axis_is_valid(axis1, epsilon) and axis_is_valid(axis2, epsilon)):
        return False
    if _is_approx(axis1, axis2, epsilon):
        return False
    return not _are_parallel(axis1, axis2, epsilon)


def build_basis(x_axis, y_axis, epsilon: float = EPSILON) -> np.ndarray:
    """
    Build a right-handed orthonormal basis from two axes.

    Args:
        x_axis: Sensor x-axis in the parent frame
        y_axis: Sensor y-axis in the parent frame (need not be orthogonal to x)
        epsilon: Tolerance for the validity checks

    Returns:
        3x3 matrix whose columns are the unit x, y and z axes, or the
        all-zero matrix when the axes are invalid. Check the result with
        basis_is_valid() before use.
    """
    basis = np.zeros((3, 3), dtype=np.float64)
    if not axes_are_valid(x_axis, y_axis, epsilon):
        return basis

    X = np.asarray(x_axis, dtype=np.float64)
    Y = np.asarray(y_axis, dtype=np.float64)
    Z = np.cross(X, Y)
    Y_ortho = np.cross(Z, X)

    basis[:, 0] = X / np.linalg.norm(X)
    basis[:, 1] = Y_ortho / np.linalg.norm(Y_ortho)
    basis[:, 2] = Z / np.linalg.norm(Z)
    return basis


def basis_is_valid(basis: np.ndarray) -> bool:
    """False for the zero-matrix sentinel returned by build_basis()."""
    return bool(np.any(basis != 0.0))


@dataclass(frozen=True)
class RigidTransform:
    """
    Rotation followed by translation, mapping sensor-frame points into
    the parent frame: p_parent = rotation @ p_sensor + translation.
    """
    rotation: np.ndarray
    translation: np.ndarray

    def __post_init__(self):
        rotation = np.array(self.rotation, dtype=np.float64).reshape(3, 3)
        translation = np.array(self.translation, dtype=np.float64).reshape(3)
        rotation.setflags(write=False)
        translation.setflags(write=False)
        object.__setattr__(self, "rotation", rotation)
        object.__setattr__(self, "translation", translation)

    @classmethod
    def identity(cls) -> "RigidTransform":
        return cls(np.eye(3), np.zeros(3))

    @property
    def matrix(self) -> np.ndarray:
        """4x4 homogeneous matrix."""
        T = np.eye(4)
        T[:3, :3] = self.rotation
        T[:3, 3] = self.translation
        return T

    @property
    def quaternion(self) -> Tuple[float, float, float, float]:
        """Rotation as an (x, y, z, w) quaternion."""
        x, y, z, w = R.from_matrix(self.rotation).as_quat(canonical=True)
        return (float(x), float(y), float(z), float(w))

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Transform (3,) or (N, 3) points into the parent frame."""
        points = np.asarray(points, dtype=np.float64)
        return points @ self.rotation.T + self.translation

    def __eq__(self, other) -> bool:
        if not isinstance(other, RigidTransform):
            return NotImplemented
        return bool(
            np.array_equal(self.rotation, other.rotation)
            and np.array_equal(self.translation, other.translation)
        )

    def __hash__(self) -> int:
        return hash((self.rotation.tobytes(), self.translation.tobytes()))


def compose_transform(basis: np.ndarray, origin) -> RigidTransform:
    """Compose translation(origin) * rotation(basis)."""
    return RigidTransform(rotation=basis, translation=origin)


def verify_pose(basis: np.ndarray, origin, label: str) -> Optional[GeometryError]:
    """Return a GeometryError if the origin or basis of `label` is unusable."""
    if not vector_is_valid(np.asarray(origin, dtype=np.float64)):
        return GeometryError(
            f"Origin for {label} is not valid. Origin must be finite and real valued."
        )
    if not basis_is_valid(basis):
        return GeometryError(
            f"Basis for {label} cannot be constructed. Check that the X/Y axes are valid."
        )
    return None


def sensor_transform(origin, x_axis, y_axis, label: str, epsilon: float = EPSILON) -> Outcome[RigidTransform]:
    """Build and verify the sensor-to-parent transform for one sensor."""
    basis = build_basis(x_axis, y_axis, epsilon)
    error = verify_pose(basis, origin, label)
    if error is not None:
        return Outcome.failure(error)
    return Outcome.success(compose_transform(basis, origin))


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box given as (min, max) per axis."""
    x_min: float
    x_max: float
    y_min: float
    y_max: float
    z_min: float
    z_max: float

    def bounds(self) -> Tuple[float, float, float, float, float, float]:
        return (self.x_min, self.x_max, self.y_min, self.y_max, self.z_min, self.z_max)

    @property
    def is_valid(self) -> bool:
        return validate_bounding_box(*self.bounds())

    @property
    def dimensions(self) -> Tuple[float, float, float]:
        return box_dimensions(*self.bounds())

    def verified(self) -> Outcome["BoundingBox"]:
        if self.is_valid:
            return Outcome.success(self)
        return Outcome.failure(BoundingBoxError(
            "Ego bounding box parameters are invalid. They must be finite, "
            f"real-valued, and ordered: x: [{self.x_min}, {self.x_max}], "
            f"y: [{self.y_min}, {self.y_max}], z: [{self.z_min}, {self.z_max}]"
        ))


def validate_bounding_box(x_min, x_max, y_min, y_max, z_min, z_max) -> bool:
    values = np.array([x_min, x_max, y_min, y_max, z_min, z_max], dtype=np.float64)
    if not np.all(np.isfinite(values)):
        return False
    return bool(x_min < x_max and y_min < y_max and z_min < z_max)


def box_dimensions(x_min, x_max, y_min, y_max, z_min, z_max) -> Tuple[float, float, float]:
    """Side lengths of a box. Only meaningful after validate_bounding_box()."""
    return (float(x_max - x_min), float(y_max - y_min), float(z_max - z_min))
