import math
from dataclasses import dataclass

import numpy as np
from numba import njit, prange


def canvas_frame(nx, ny):
    """Scale and shift that map the normalized square onto a canvas.

    Both axes share the scale ``min(nx, ny) / 2`` so that shapes keep their
    aspect ratio on non-square canvases.

    Args:
        nx (int): Number of pixels in x direction.
        ny (int): Number of pixels in y direction.

    Returns:
        (tuple): ``(scale, nx_half, ny_half)``.
    """
    nx_half = nx / 2.0
    ny_half = ny / 2.0
    return min(nx_half, ny_half), nx_half, ny_half


def _clamp(value, n):
    """Clamp a floored/ceiled canvas coordinate into ``[0, n - 1]``."""
    if not value >= 0.0:  # NaN lands here too
        return 0
    if value >= n:
        return max(n - 1, 0)
    return int(value)


@dataclass(frozen=True)
class BoundingBox:
    """Axis aligned pixel rectangle, inclusive on both ends."""

    x_low: int
    x_high: int
    y_low: int
    y_high: int

    @classmethod
    def from_tuple(cls, bounds):
        x_low, x_high, y_low, y_high = bounds
        return cls(x_low, x_high, y_low, y_high)

    @classmethod
    def from_extent(cls, x_min, x_max, y_min, y_max, nx, ny):
        """Build the box from real-valued canvas extents.

        Lower bounds are floored, upper bounds ceiled, and everything is
        clamped into the canvas.
        """
        return cls(
            _clamp(np.floor(x_min), nx),
            _clamp(np.ceil(x_max), nx),
            _clamp(np.floor(y_min), ny),
            _clamp(np.ceil(y_max), ny),
        )

    def as_tuple(self):
        return (self.x_low, self.x_high, self.y_low, self.y_high)

    def grid(self):
        """Pixel coordinates covered by the box in image row order.

        Rows run from ``y_high`` down to ``y_low`` so that row ``i`` of the
        returned grids lines up with image row ``ny - y_high - 1 + i``.

        Returns:
            X (np.ndarray): x coordinates, shape (n_rows, n_cols).
            Y (np.ndarray): y coordinates, shape (n_rows, n_cols).
        """
        xs = np.arange(self.x_low, self.x_high + 1, dtype=np.float64)
        ys = np.arange(self.y_high, self.y_low - 1, -1, dtype=np.float64)
        X, Y = np.meshgrid(xs, ys)
        return X, Y


def _as_result(mask):
    # Scalar queries get a plain bool back
    if np.ndim(mask) == 0:
        return bool(mask)
    return mask


def _nothing_inside(x, y):
    shape = np.broadcast(np.asarray(x), np.asarray(y)).shape
    return _as_result(np.zeros(shape, dtype=bool))


# ---------------------------------------------------------------------------
# Ellipse
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ellipse:
    """Ellipse in the normalized ``[-1, 1] x [-1, 1]`` square.

    Attributes:
        center_x (float): x component of the center.
        center_y (float): y component of the center.
        major_axis (float): Axis length along the rotated x direction.
        minor_axis (float): Axis length along the rotated y direction.
        theta (float): Counterclockwise rotation in degrees.
    """

    center_x: float
    center_y: float
    major_axis: float
    minor_axis: float
    theta: float

    def on_canvas(self, nx, ny):
        """Project the ellipse onto a canvas of ``nx`` times ``ny`` pixels."""
        theta = math.radians(self.theta)
        theta_sin = math.sin(theta)
        theta_cos = math.cos(theta)
        theta_pi2_sin = math.sin(theta + math.pi / 2)
        theta_pi2_cos = math.cos(theta + math.pi / 2)

        # Half extents of the rotated ellipse in normalized coordinates
        ux = self.major_axis * theta_cos
        uy = self.major_axis * theta_sin
        vx = self.minor_axis * theta_pi2_cos
        vy = self.minor_axis * theta_pi2_sin
        halfwidth = math.sqrt(ux * ux + vx * vx)
        halfheight = math.sqrt(uy * uy + vy * vy)

        scale, nx_half, ny_half = canvas_frame(nx, ny)
        bbox = BoundingBox.from_extent(
            (self.center_x - halfwidth) * scale + nx_half,
            (self.center_x + halfwidth) * scale + nx_half,
            (self.center_y - halfheight) * scale + ny_half,
            (self.center_y + halfheight) * scale + ny_half,
            nx,
            ny,
        )

        major_axis = self.major_axis * scale
        minor_axis = self.minor_axis * scale

        return EllipseOnCanvas(
            center_x=self.center_x * scale + nx_half,
            center_y=self.center_y * scale + ny_half,
            major_axis_squared=major_axis * major_axis,
            minor_axis_squared=minor_axis * minor_axis,
            theta_sin=theta_sin,
            theta_cos=theta_cos,
            bbox=bbox,
            # Negative and NaN axes count as degenerate as well
            empty=not (self.major_axis > 0.0 and self.minor_axis > 0.0),
        )


@dataclass(frozen=True)
class EllipseOnCanvas:
    """Ellipse in absolute pixel coordinates of one canvas."""

    center_x: float
    center_y: float
    major_axis_squared: float
    minor_axis_squared: float
    theta_sin: float
    theta_cos: float
    bbox: BoundingBox
    empty: bool = False

    def bounding_box(self):
        return self.bbox

    def inside(self, x, y):
        """Check whether the point(s) ``(x, y)`` lie inside the ellipse.

        The boundary counts as inside. ``x`` and ``y`` may be scalars or
        arrays of matching shape.
        """
        if self.empty:
            return _nothing_inside(x, y)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            dx = np.asarray(x, dtype=np.float64) - self.center_x
            dy = np.asarray(y, dtype=np.float64) - self.center_y
            u = self.theta_cos * dx + self.theta_sin * dy
            v = self.theta_sin * dx - self.theta_cos * dy
            mask = u * u / self.major_axis_squared + v * v / self.minor_axis_squared <= 1.0
        return _as_result(mask)

    def accumulate_parallel(self, image, intensity):
        if self.empty:
            return
        b = self.bbox
        _accumulate_ellipse(
            image,
            b.x_low,
            b.x_high,
            b.y_low,
            b.y_high,
            self.center_x,
            self.center_y,
            self.theta_cos,
            self.theta_sin,
            self.major_axis_squared,
            self.minor_axis_squared,
            intensity,
        )


@njit(parallel=True, error_model="numpy")
def _accumulate_ellipse(
    image, x_low, x_high, y_low, y_high, cx, cy, cos_t, sin_t, a2, b2, intensity
):
    """Add ``intensity`` to every pixel of the bounding box inside the ellipse.

    Rows of the box are split across threads, so no two threads ever touch
    the same pixel.
    """
    ny = image.shape[0]
    for y in prange(y_low, y_high + 1):
        row = ny - y - 1
        dy = y - cy
        for x in range(x_low, x_high + 1):
            dx = x - cx
            u = cos_t * dx + sin_t * dy
            v = sin_t * dx - cos_t * dy
            if u * u / a2 + v * v / b2 <= 1.0:
                image[row, x] += intensity


# ---------------------------------------------------------------------------
# Rectangle
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rectangle:
    """Rectangle in the normalized ``[-1, 1] x [-1, 1]`` square.

    The rotation is applied to the corners about the origin of the normalized
    square.
    """

    center_x: float
    center_y: float
    width: float
    height: float
    theta: float

    def corners(self):
        """Unrotated corners ``A, B, C, D`` in consecutive order."""
        width_half = self.width / 2.0
        height_half = self.height / 2.0
        return (
            (self.center_x - width_half, self.center_y - height_half),
            (self.center_x - width_half, self.center_y + height_half),
            (self.center_x + width_half, self.center_y + height_half),
            (self.center_x + width_half, self.center_y - height_half),
        )

    def on_canvas(self, nx, ny):
        """Project the rectangle onto a canvas of ``nx`` times ``ny`` pixels."""
        theta = math.radians(self.theta)
        theta_sin = math.sin(theta)
        theta_cos = math.cos(theta)
        scale, nx_half, ny_half = canvas_frame(nx, ny)

        points = []
        for x, y in self.corners():
            xr = x * theta_cos - y * theta_sin
            yr = x * theta_sin + y * theta_cos
            points.append((xr * scale + nx_half, yr * scale + ny_half))
        a, b, c, d = points

        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        bbox = BoundingBox.from_extent(min(xs), max(xs), min(ys), max(ys), nx, ny)

        ab = (b[0] - a[0], b[1] - a[1])
        bc = (c[0] - b[0], c[1] - b[1])

        return RectangleOnCanvas(
            a=a,
            b=b,
            ab=ab,
            bc=bc,
            abab=ab[0] * ab[0] + ab[1] * ab[1],
            bcbc=bc[0] * bc[0] + bc[1] * bc[1],
            bbox=bbox,
            empty=not (self.width > 0.0 and self.height > 0.0),
        )


@dataclass(frozen=True)
class RectangleOnCanvas:
    """Rectangle in absolute pixel coordinates of one canvas.

    ``a`` and ``b`` are two consecutive corners, ``ab`` and ``bc`` the edge
    vectors leaving them and ``abab``/``bcbc`` their squared lengths. A
    rectangle without a positive width and height is ``empty`` and contains
    no point.
    """

    a: tuple
    b: tuple
    ab: tuple
    bc: tuple
    abab: float
    bcbc: float
    bbox: BoundingBox
    empty: bool = False

    def bounding_box(self):
        return self.bbox

    def inside(self, x, y):
        """Check whether the point(s) ``(x, y)`` lie inside the rectangle.

        A point ``M`` is inside iff its projections onto ``AB`` and ``BC`` fall
        within the edges: ``0 <= AB.AM <= AB.AB`` and ``0 <= BC.BM <= BC.BC``.
        """
        if self.empty:
            return _nothing_inside(x, y)
        with np.errstate(invalid="ignore", over="ignore"):
            x = np.asarray(x, dtype=np.float64)
            y = np.asarray(y, dtype=np.float64)
            abam = self.ab[0] * (x - self.a[0]) + self.ab[1] * (y - self.a[1])
            bcbm = self.bc[0] * (x - self.b[0]) + self.bc[1] * (y - self.b[1])
            mask = (0.0 <= abam) & (abam <= self.abab) & (0.0 <= bcbm) & (bcbm <= self.bcbc)
        return _as_result(mask)

    def accumulate_parallel(self, image, intensity):
        if self.empty:
            return
        b = self.bbox
        _accumulate_rectangle(
            image,
            b.x_low,
            b.x_high,
            b.y_low,
            b.y_high,
            self.a[0],
            self.a[1],
            self.b[0],
            self.b[1],
            self.ab[0],
            self.ab[1],
            self.bc[0],
            self.bc[1],
            self.abab,
            self.bcbc,
            intensity,
        )


@njit(parallel=True, error_model="numpy")
def _accumulate_rectangle(
    image,
    x_low,
    x_high,
    y_low,
    y_high,
    a_x,
    a_y,
    b_x,
    b_y,
    ab_x,
    ab_y,
    bc_x,
    bc_y,
    abab,
    bcbc,
    intensity,
):
    """Row-parallel counterpart of ``RectangleOnCanvas.inside`` + accumulation."""
    ny = image.shape[0]
    for y in prange(y_low, y_high + 1):
        row = ny - y - 1
        for x in range(x_low, x_high + 1):
            abam = ab_x * (x - a_x) + ab_y * (y - a_y)
            bcbm = bc_x * (x - b_x) + bc_y * (y - b_y)
            if 0.0 <= abam and abam <= abab and 0.0 <= bcbm and bcbm <= bcbc:
                image[row, x] += intensity
