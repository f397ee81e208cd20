from dataclasses import dataclass
from typing import Union

from phantom.geometry import Ellipse, EllipseOnCanvas, Rectangle, RectangleOnCanvas


@dataclass(frozen=True)
class Shape:
    """A shape with an additive intensity.

    Shapes are defined on the square ``[-1, 1] x [-1, 1]`` and only get scaled
    onto an actual pixel grid when a phantom is rendered. The intensity may be
    negative, which is how nested contrast regions are carved out of larger
    shapes.
    """

    intensity: float
    kind: Union[Ellipse, Rectangle]

    @classmethod
    def ellipse(cls, center_x, center_y, major_axis, minor_axis, theta, intensity):
        """Create an ellipse.

        Args:
            center_x (float): x component of the center.
            center_y (float): y component of the center.
            major_axis (float): Major axis length.
            minor_axis (float): Minor axis length.
            theta (float): Rotation angle in degrees.
            intensity (float): Value added to every pixel inside the ellipse.

        Returns:
            (Shape): The ellipse.
        """
        return cls(intensity, Ellipse(center_x, center_y, major_axis, minor_axis, theta))

    @classmethod
    def rectangle(cls, center_x, center_y, width, height, theta, intensity):
        """Create a rectangle.

        Args:
            center_x (float): x component of the center.
            center_y (float): y component of the center.
            width (float): Extent along x before rotation.
            height (float): Extent along y before rotation.
            theta (float): Rotation angle in degrees, about the origin.
            intensity (float): Value added to every pixel inside the rectangle.

        Returns:
            (Shape): The rectangle.
        """
        return cls(intensity, Rectangle(center_x, center_y, width, height, theta))

    def on_canvas(self, nx, ny):
        """Transform the shape onto a canvas of ``nx`` times ``ny`` pixels."""
        return ShapeOnCanvas(self.intensity, self.kind.on_canvas(nx, ny))


@dataclass(frozen=True)
class ShapeOnCanvas:
    """A shape scaled onto the canvas of one phantom."""

    intensity: float
    kind: Union[EllipseOnCanvas, RectangleOnCanvas]

    def inside(self, x, y):
        return self.kind.inside(x, y)

    def bounding_box(self):
        return self.kind.bounding_box()

    def accumulate_parallel(self, image):
        self.kind.accumulate_parallel(image, self.intensity)


# Factories keyed by the ``kind`` field of a shape mapping, with the size
# keys each one expects after the center.
SHAPE_KINDS = {
    "ellipse": (Shape.ellipse, ("major_axis", "minor_axis")),
    "rectangle": (Shape.rectangle, ("width", "height")),
}


def shape_from_config(cfg):
    """Build a ``Shape`` from a mapping such as a hydra config node.

    The mapping needs ``kind``, ``center`` (a pair) and ``intensity`` plus the
    size keys of the kind. ``theta`` defaults to 0.

    Example:
        ``{"kind": "ellipse", "center": [0, 0], "major_axis": 0.5,
        "minor_axis": 0.3, "theta": 10, "intensity": 1.0}``
    """
    kind = cfg["kind"]
    if kind not in SHAPE_KINDS:
        raise ValueError(
            f"Unknown shape kind: {kind}. Should be one of {', '.join(SHAPE_KINDS)}"
        )
    factory, size_keys = SHAPE_KINDS[kind]

    center_x, center_y = cfg["center"]
    sizes = [float(cfg[key]) for key in size_keys]
    theta = float(cfg.get("theta", 0.0))

    return factory(
        float(center_x), float(center_y), *sizes, theta, float(cfg["intensity"])
    )
