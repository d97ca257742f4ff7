"""
Loss Functions
==============

Training is driven by plain per-sample mean squared error.

Two quantities are exposed:
- forward(predictions, targets): the scalar loss reported during training
- error(predictions, targets): the signal handed to the output layer's
  backward pass, defined as ``targets - predictions``

The error keeps the sign of (target - prediction); the layer update adds the
scaled gradient, which together is ordinary descent on the squared error.
"""

import numpy as np

from .exceptions import SizeMismatch
from .matrix import Matrix


class Loss:
    """Base class for loss functions."""

    def forward(self, predictions, targets):
        """Compute loss value."""
        raise NotImplementedError

    def error(self, predictions, targets):
        """Compute the error signal fed to backpropagation."""
        raise NotImplementedError

    def __call__(self, predictions, targets):
        return self.forward(predictions, targets)


class MSELoss(Loss):
    """
    Mean Squared Error for a single sample.

    Formula: L = (1/n) * sum((y_true - y_pred)^2)
    """

    def forward(self, predictions, targets):
        p = np.asarray(predictions, dtype=np.float64).reshape(-1)
        t = np.asarray(targets, dtype=np.float64).reshape(-1)

        if p.size != t.size:
            raise SizeMismatch(f"Prediction has {p.size} values, target has {t.size}")
        if p.size == 0:
            return 0.0

        return float(np.mean((t - p) ** 2))

    def error(self, predictions, targets):
        """targets - predictions, as a column Matrix."""
        if not isinstance(predictions, Matrix):
            predictions = Matrix.from_array(predictions)
        if not isinstance(targets, Matrix):
            targets = Matrix.from_array(targets)

        if targets.shape != predictions.shape:
            raise SizeMismatch(
                f"Target width {targets.rows} does not match output width {predictions.rows}")

        return targets.subtract(predictions)
