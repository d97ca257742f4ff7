"""
Dense Matrix Engine
===================

A 2-D matrix of float64 values stored as a flat, row-major NumPy buffer.

All arithmetic returns a new Matrix and leaves its operands untouched. The only
mutating operations are the in-place helpers:
- set, randomize, apply_in_place
- add_in_place, subtract_in_place

Large operations are split across threads by ``ffnet.parallel``:
- dot: independent output rows
- transpose: independent source rows
- elementwise ops: contiguous element ranges

Parallel and sequential paths compute the same values. For ``dot`` the row
blocks may be summed in a different order by BLAS, so compare with a tolerance.
"""

import numpy as np

from . import parallel
from .exceptions import DimensionMismatch, SizeMismatch

# Elements per independently seeded generator in randomize()
RANDOM_BLOCK_SIZE = 256


def _draw_entropy(rng):
    """Pull a seed for a SeedSequence from ``rng`` or the global NumPy state."""
    if rng is None:
        return int(np.random.randint(0, 2 ** 63 - 1, dtype=np.int64))
    return int(rng.integers(0, 2 ** 63 - 1))


class Matrix:
    """
    Dense row-major matrix.

    Args:
        rows: Number of rows (>= 0)
        cols: Number of columns (>= 0)
        data: Optional flat or 2-D values; zero-filled when omitted

    Example:
        >>> a = Matrix(2, 3, [1, 2, 3, 4, 5, 6])
        >>> b = Matrix.transpose(a)
        >>> Matrix.dot(a, b).to_array()
        [14.0, 32.0, 32.0, 77.0]
    """

    __hash__ = None

    def __init__(self, rows, cols, data=None):
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be >= 0, got ({rows}, {cols})")

        self.rows = int(rows)
        self.cols = int(cols)

        if data is None:
            self.data = np.zeros(self.rows * self.cols, dtype=np.float64)
        else:
            buffer = np.array(data, dtype=np.float64).reshape(-1)
            if buffer.size != self.rows * self.cols:
                raise SizeMismatch(
                    f"Got {buffer.size} values for a {self.rows}x{self.cols} matrix")
            self.data = buffer

    # ------------------------------------------------------------------
    # Factories and conversion
    # ------------------------------------------------------------------

    @classmethod
    def from_array(cls, values):
        """Build a column matrix (len(values) x 1)."""
        buffer = np.array(values, dtype=np.float64).reshape(-1)
        return cls(buffer.size, 1, buffer)

    @classmethod
    def random(cls, rows, cols, rng=None):
        """Create a matrix filled uniformly from [-1, 1)."""
        m = cls(rows, cols)
        m.randomize(rng)
        return m

    def to_array(self):
        """Flatten row-major into a list of floats."""
        return self.data.tolist()

    def to_numpy(self):
        """Return a 2-D copy of the values."""
        return self.data.reshape(self.rows, self.cols).copy()

    def copy(self):
        return Matrix(self.rows, self.cols, self.data)

    @property
    def shape(self):
        return (self.rows, self.cols)

    @property
    def T(self):
        return Matrix.transpose(self)

    def _grid(self):
        # 2-D view sharing memory with self.data
        return self.data.reshape(self.rows, self.cols)

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def _check_index(self, row, col):
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(
                f"Index ({row}, {col}) out of range for {self.rows}x{self.cols} matrix")

    def get(self, row, col):
        self._check_index(row, col)
        return float(self.data[row * self.cols + col])

    def set(self, row, col, value):
        self._check_index(row, col)
        self.data[row * self.cols + col] = value

    # ------------------------------------------------------------------
    # Random fill
    # ------------------------------------------------------------------

    def randomize(self, rng=None):
        """
        Fill every element uniformly from [-1, 1), in place.

        The buffer is cut into fixed blocks of ``RANDOM_BLOCK_SIZE`` elements and
        each block gets its own child generator spawned from one SeedSequence.
        No generator is shared between threads, and for a given ``rng`` state the
        result does not depend on how many workers ran.

        Args:
            rng: numpy.random.Generator to draw the seed from; the global NumPy
                 state is used when None
        """
        size = self.data.size
        if size == 0:
            return

        n_blocks = (size + RANDOM_BLOCK_SIZE - 1) // RANDOM_BLOCK_SIZE
        children = np.random.SeedSequence(_draw_entropy(rng)).spawn(n_blocks)
        data = self.data

        def fill(start, stop):
            for block in range(start, stop):
                lo = block * RANDOM_BLOCK_SIZE
                hi = min(lo + RANDOM_BLOCK_SIZE, size)
                generator = np.random.default_rng(children[block])
                data[lo:hi] = generator.uniform(-1.0, 1.0, hi - lo)

        parallel.parallel_for(n_blocks, fill, work_size=size)

    # ------------------------------------------------------------------
    # Linear algebra
    # ------------------------------------------------------------------

    @staticmethod
    def dot(a, b):
        """
        Matrix product a . b.

        Output rows are independent, so above the threshold
        (a.rows * b.cols) they are computed in parallel row blocks.

        Raises:
            DimensionMismatch: if a.cols != b.rows
        """
        if a.cols != b.rows:
            raise DimensionMismatch(
                f"Cannot multiply {a.rows}x{a.cols} by {b.rows}x{b.cols}: "
                f"{a.cols} columns vs {b.rows} rows")

        result = Matrix(a.rows, b.cols)
        left = a._grid()
        right = b._grid()
        out = result._grid()

        def rows_block(start, stop):
            out[start:stop] = left[start:stop] @ right

        parallel.parallel_for(a.rows, rows_block, work_size=a.rows * b.cols)
        return result

    @staticmethod
    def transpose(m):
        """Return the cols x rows transpose. No arithmetic, so it is exact."""
        result = Matrix(m.cols, m.rows)
        source = m._grid()
        target = result._grid()

        def rows_block(start, stop):
            target[:, start:stop] = source[start:stop].T

        parallel.parallel_for(m.rows, rows_block, work_size=m.data.size)
        return result

    # ------------------------------------------------------------------
    # Elementwise arithmetic
    # ------------------------------------------------------------------

    def _check_size_match(self, other):
        if self.rows != other.rows or self.cols != other.cols:
            raise SizeMismatch(
                f"Matrix size mismatch: {self.rows}x{self.cols} vs {other.rows}x{other.cols}")

    def _combine(self, other, ufunc):
        self._check_size_match(other)
        result = Matrix(self.rows, self.cols)
        lhs, rhs, out = self.data, other.data, result.data

        def chunk(start, stop):
            ufunc(lhs[start:stop], rhs[start:stop], out=out[start:stop])

        parallel.parallel_for(lhs.size, chunk)
        return result

    def add(self, other):
        """Elementwise sum. Raises SizeMismatch on shape difference."""
        return self._combine(other, np.add)

    def subtract(self, other):
        """Elementwise difference. Raises SizeMismatch on shape difference."""
        return self._combine(other, np.subtract)

    @staticmethod
    def hadamard(a, b):
        """Elementwise product. Raises SizeMismatch on shape difference."""
        return a._combine(b, np.multiply)

    def multiply(self, scalar):
        """Scale every element by ``scalar``."""
        result = Matrix(self.rows, self.cols)
        source, out = self.data, result.data
        scalar = float(scalar)

        def chunk(start, stop):
            np.multiply(source[start:stop], scalar, out=out[start:stop])

        parallel.parallel_for(source.size, chunk)
        return result

    def add_in_place(self, other):
        """self += other. The shape check runs before anything is written."""
        self._check_size_match(other)
        target, source = self.data, other.data

        def chunk(start, stop):
            target[start:stop] += source[start:stop]

        parallel.parallel_for(target.size, chunk)
        return self

    def subtract_in_place(self, other):
        """self -= other. The shape check runs before anything is written."""
        self._check_size_match(other)
        target, source = self.data, other.data

        def chunk(start, stop):
            target[start:stop] -= source[start:stop]

        parallel.parallel_for(target.size, chunk)
        return self

    # ------------------------------------------------------------------
    # Function application
    # ------------------------------------------------------------------

    @staticmethod
    def _apply(func, source, target):
        def chunk(start, stop):
            for i in range(start, stop):
                target[i] = func(float(source[i]))

        parallel.parallel_for(source.size, chunk)

    def map(self, func):
        """Return a new matrix with ``func`` applied to every element."""
        result = Matrix(self.rows, self.cols)
        self._apply(func, self.data, result.data)
        return result

    def apply_in_place(self, func):
        """Apply ``func`` to every element, mutating this matrix."""
        self._apply(func, self.data, self.data)
        return self

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)

    def __mul__(self, scalar):
        if isinstance(scalar, Matrix):
            return NotImplemented
        return self.multiply(scalar)

    __rmul__ = __mul__

    def __matmul__(self, other):
        return Matrix.dot(self, other)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self.data, other.data)

    def __repr__(self):
        return f"Matrix({self.rows}, {self.cols})"

    def __str__(self):
        lines = []
        for i in range(self.rows):
            row = self.data[i * self.cols:(i + 1) * self.cols]
            lines.append(" ".join(f"{value:.4f}" for value in row))
        return "\n".join(lines)
