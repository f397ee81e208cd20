import logging

import numpy as np

from phantom.result import Phantom

log = logging.getLogger(__name__)


def check_dimensions(nx, ny):
    """Reject canvas dimensions that are not non-negative integers.

    Zero is allowed and yields an empty phantom.
    """
    for name, n in (("nx", nx), ("ny", ny)):
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 0:
            raise ValueError(f"{name} must be a non-negative integer, got {n!r}.")


def accumulate_sequential(image, shape):
    """Add one projected shape onto the image.

    Only the bounding box of the shape is scanned. Rows of ``image`` are image
    rows (row 0 on top), so canvas row ``y`` is found at ``ny - y - 1``.

    Parameters
    ----------
        image (np.ndarray): (ny, nx) view of the phantom buffer, updated in place.
        shape (ShapeOnCanvas): Shape projected onto the same canvas.
    """
    ny = image.shape[0]
    bbox = shape.bounding_box()
    assert bbox.y_high < ny, "bounding box exceeds the canvas"

    X, Y = bbox.grid()
    mask = shape.inside(X, Y)

    # Rows of the grid run from y_high down to y_low
    region = image[ny - bbox.y_high - 1 : ny - bbox.y_low, bbox.x_low : bbox.x_high + 1]
    region[mask] += shape.intensity


def accumulate_parallel(image, shape):
    """Numba counterpart of ``accumulate_sequential``.

    Rows of the bounding box are distributed over threads. Shapes are still
    added one after another, but bit-identical output to the sequential path
    is not guaranteed.
    """
    shape.accumulate_parallel(image)


def rasterize(shapes, nx, ny, mode="sequential"):
    """Sum the intensities of ``shapes`` onto an ``nx`` times ``ny`` grid.

    Parameters
    ----------
        shapes (Sequence[Shape]): Shapes in normalized coordinates.
        nx (int): Number of pixels in x direction.
        ny (int): Number of pixels in y direction.
        mode (str): "sequential" (numpy) or "parallel" (numba, multithreaded).

    Returns
    -------
        data (np.ndarray): Row-major float64 buffer of length ``nx * ny``.
            Pixel ``(x, y)`` lives at index ``(ny - y - 1) * nx + x``.
    """
    check_dimensions(nx, ny)
    shapes = list(shapes)
    if mode == "sequential":
        accumulate = accumulate_sequential
    elif mode == "parallel":
        accumulate = accumulate_parallel
    else:
        raise ValueError(f"Unknown render mode: {mode}. Should be sequential or parallel")

    data = np.zeros(nx * ny, dtype=np.float64)
    if nx == 0 or ny == 0:
        return data

    image = data.reshape(ny, nx)
    for shape in shapes:
        accumulate(image, shape.on_canvas(nx, ny))

    log.debug("Rendered %d shapes onto %dx%d canvas (%s)", len(shapes), nx, ny, mode)
    return data


def render(shapes, nx, ny, mode="sequential"):
    """Render ``shapes`` into a ``Phantom`` of ``nx`` times ``ny`` pixels.

    See ``rasterize`` for the parameters.
    """
    return Phantom(rasterize(shapes, nx, ny, mode), nx, ny)
