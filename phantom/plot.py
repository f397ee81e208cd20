import logging

import matplotlib.pyplot as plt
import numpy as np

log = logging.getLogger(__name__)


def save_phantom(phantom, path, normalize=True):
    """Write a phantom to disk as an 8-bit grayscale image.

    Parameters
    ----------
        phantom (Phantom): Phantom to save.
        path (str or Path): Output filename, the format follows the extension.
        normalize (bool): Map the dynamic range of the phantom onto [0, 255]
            first. Without it the values are expected to be in that range
            already and are cast as they are.

    Returns
    -------
        pixels (np.ndarray): The (ny, nx) uint8 array that was written.
    """
    if normalize:
        phantom = phantom.normalized(255.0)
    pixels = phantom.into_vec_u8().reshape(phantom.ny, phantom.nx)

    plt.imsave(path, pixels, cmap="gray", vmin=0, vmax=255)
    log.info("Wrote %dx%d phantom to %s", phantom.nx, phantom.ny, path)
    return pixels


def show_phantom(phantom, title="Phantom", block=True):
    """Display a phantom with matplotlib.

    Parameters
    ----------
        phantom (Phantom): Phantom to show.
        title (str): Figure title.
        block (bool): Wait until the window is closed.

    Returns
    -------
        fig (matplotlib.figure.Figure): The figure.
    """
    low, high = phantom.extrema()
    fig, ax = plt.subplots(figsize=(6, 6 * phantom.ny / max(phantom.nx, 1)))
    ax.imshow(phantom.image(), cmap="gray", vmin=low, vmax=high)
    ax.set_title(title)
    ax.axis("off")

    if block:
        plt.show()
    else:
        plt.draw()
        plt.pause(0.001)
    return fig


def compare_phantoms(first, second, titles=("First", "Second")):
    """Show two phantoms side by side together with their difference."""
    assert first.shape == second.shape, "Phantoms must have the same shape"
    diff = first.image() - second.image()

    fig, axes = plt.subplots(1, 3, figsize=(15, 5))
    for ax, img, title in zip(
        axes,
        (first.image(), second.image(), diff),
        (*titles, "Difference"),
    ):
        ax.imshow(img, cmap="gray")
        ax.set_title(title)
        ax.axis("off")

    log.info("Max absolute difference: %g", np.abs(diff).max() if diff.size else 0.0)
    plt.tight_layout()
    return fig
