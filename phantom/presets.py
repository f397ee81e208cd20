from phantom.project import render
from phantom.shape import Shape

# Ellipse geometry shared by both Shepp-Logan variants:
# (center_x, center_y, major_axis, minor_axis, theta)
SHEPP_LOGAN_ELLIPSES = [
    (0.0, 0.35, 0.21, 0.25, 0.0),
    (0.0, 0.1, 0.046, 0.046, 0.0),
    (0.0, -0.1, 0.046, 0.046, 0.0),
    (-0.08, -0.605, 0.046, 0.023, 0.0),
    (0.0, -0.605, 0.023, 0.023, 0.0),
    (0.06, -0.605, 0.023, 0.046, 0.0),
    (0.22, 0.0, 0.11, 0.31, -18.0),
    (-0.22, 0.0, 0.16, 0.41, 18.0),
    (0.0, -0.0184, 0.6624, 0.874, 0.0),
    (0.0, 0.0, 0.69, 0.92, 0.0),
]

SHEPP_LOGAN_INTENSITIES = [0.01] * 6 + [-0.02, -0.02, -0.98, 2.0]

SHEPP_LOGAN_MODIFIED_INTENSITIES = [0.1] * 6 + [-0.2, -0.2, -0.8, 1.0]


def shepp_logan_shapes(intensities=SHEPP_LOGAN_INTENSITIES):
    """The ten Shepp-Logan ellipses with the given intensities."""
    assert len(intensities) == len(SHEPP_LOGAN_ELLIPSES), (
        "One intensity per ellipse is needed"
    )
    return [
        Shape.ellipse(*params, intensity)
        for params, intensity in zip(SHEPP_LOGAN_ELLIPSES, intensities)
    ]


def shepp_logan(nx, ny, mode="sequential"):
    """Original Shepp-Logan phantom.

    Shepp, LA and Logan BF, "The Fourier reconstruction of a head section."
    IEEE Transactions on Nuclear Science 21, No. 3 (1974)

    Parameters:
    ----------
        nx (int): Number of pixels in x direction.
        ny (int): Number of pixels in y direction.
        mode (str): Render mode, see ``phantom.project.rasterize``.

    Returns:
    -------
        (Phantom): Phantom with values between 0.0 and 2.0.
    """
    return render(shepp_logan_shapes(SHEPP_LOGAN_INTENSITIES), nx, ny, mode)


def shepp_logan_modified(nx, ny, mode="sequential"):
    """Modified Shepp-Logan phantom with better contrast.

    Toft, PA, "The Radon Transform - Theory and Implementation", PhD
    dissertation, Department of Mathematical Modelling, Technical University
    of Denmark (1996)

    Parameters:
    ----------
        nx (int): Number of pixels in x direction.
        ny (int): Number of pixels in y direction.
        mode (str): Render mode, see ``phantom.project.rasterize``.

    Returns:
    -------
        (Phantom): Phantom with values between 0.0 and 1.0.
    """
    return render(shepp_logan_shapes(SHEPP_LOGAN_MODIFIED_INTENSITIES), nx, ny, mode)


def rotated_squares_shapes(count=5):
    """Unit squares rotated in steps of ``90 / count`` degrees with smaller
    squares subtracted from their centre."""
    if not isinstance(count, int) or count <= 0:
        raise ValueError("count must be a positive integer.")
    step = 90.0 / count
    outer = [Shape.rectangle(0.0, 0.0, 1.0, 1.0, i * step, 255.0 / count) for i in range(count)]
    inner = [Shape.rectangle(0.0, 0.0, 0.6, 0.6, i * step, -255.0 / count) for i in range(count)]
    return outer + inner


def rotated_squares(nx, ny, count=5, mode="sequential"):
    """Phantom of rotated, hollowed squares with values in ``[0, 255]``."""
    return render(rotated_squares_shapes(count), nx, ny, mode)


PRESETS = {
    "original": shepp_logan,
    "modified": shepp_logan_modified,
    "rotated_squares": rotated_squares,
}


def preset(name, nx, ny, mode="sequential"):
    """Render the preset called ``name``."""
    if name not in PRESETS:
        raise ValueError(
            f"Unknown preset: {name}. Should be one of {', '.join(PRESETS)}"
        )
    return PRESETS[name](nx, ny, mode=mode)
