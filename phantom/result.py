import numpy as np


class Phantom:
    """Rendered phantom.

    Holds the flat, row-major intensity buffer (row 0 is the top of the image)
    together with the canvas dimensions. Minimum and maximum are computed
    lazily and cached; ``scale`` is the only operation that modifies the
    buffer and it keeps the cache consistent.

    Parameters
    ----------
        data (np.ndarray): Buffer of length ``nx * ny``.
        nx (int): Number of pixels in x direction.
        ny (int): Number of pixels in y direction.
    """

    def __init__(self, data, nx, ny):
        data = np.asarray(data, dtype=np.float64).reshape(-1)
        if data.size != nx * ny:
            raise ValueError(
                f"Buffer has {data.size} values, expected nx * ny = {nx * ny}."
            )
        self.data = data
        self.nx = nx
        self.ny = ny
        self._minmax = None

    def __len__(self):
        return self.data.size

    def __repr__(self):
        return f"Phantom(nx={self.nx}, ny={self.ny})"

    @property
    def shape(self):
        return (self.ny, self.nx)

    def image(self):
        """Return the buffer as an (ny, nx) array view, row 0 on top."""
        return self.data.reshape(self.ny, self.nx)

    def scale(self, factor):
        """Multiply every value of the phantom with ``factor``.

        Cached extrema are scaled along with the data (and swapped for
        negative factors) instead of being recomputed.

        Returns:
            (Phantom): ``self``, so calls can be chained.
        """
        self.data *= factor
        if self._minmax is not None:
            low, high = self._minmax[0] * factor, self._minmax[1] * factor
            self._minmax = (high, low) if factor < 0 else (low, high)
        return self

    def extrema(self):
        """Return ``(min, max)`` of the phantom.

        The result is cached after the first call. An empty phantom gives
        ``(inf, -inf)``.
        """
        if self._minmax is None:
            if self.data.size == 0:
                self._minmax = (float("inf"), float("-inf"))
            else:
                self._minmax = (float(self.data.min()), float(self.data.max()))
        return self._minmax

    def normalized(self, high=255.0):
        """Return a copy whose dynamic range is mapped onto ``[0, high]``.

        A constant phantom maps to all zeros.
        """
        low, top = self.extrema()
        out = Phantom(self.data.copy(), self.nx, self.ny)
        if self.data.size == 0 or top == low:
            out.data[:] = 0.0
            return out
        out.data -= low
        return out.scale(high / (top - low))

    def into_vec(self, dtype=np.float64):
        """Return the flattened phantom converted element-wise to ``dtype``."""
        return self.data.astype(dtype)

    def into_vec_u8(self):
        """Return the flattened phantom cast to ``uint8``.

        The cast does not clamp. Callers must bring the values into
        ``[0, 255]`` first (e.g. with ``scale`` or ``normalized``); anything
        outside that range is truncated or wraps.
        """
        return self.data.astype(np.uint8)
