"""
Activation Functions
====================

Non-linear functions applied after each layer's affine transform.

Every activation exposes a scalar form and a vector form:
- activate(x): scalar forward
- derivative(y): scalar derivative, written in terms of the *activated output*
  y = activate(x), not the pre-activation input
- activate_vector / derivative_vector: elementwise by default

Activations hold no state, so one instance can be shared by any number of
layers.

Available:
- ReLU: max(0, x)
- Sigmoid: logistic 1 / (1 + exp(-x))
- Softmax: normalized exponential over a whole vector
"""

import math

import numpy as np

# Below this exponential sum Softmax falls back to a uniform distribution
SOFTMAX_EPSILON = 1e-10


class Activation:
    """Base class for all activation functions."""

    name = None

    def activate(self, x):
        """Apply activation function to a scalar."""
        raise NotImplementedError

    def derivative(self, y):
        """Derivative expressed through the activated output ``y``."""
        raise NotImplementedError

    def activate_vector(self, values):
        return [self.activate(float(x)) for x in values]

    def derivative_vector(self, outputs):
        return [self.derivative(float(y)) for y in outputs]

    def __call__(self, values):
        return self.activate_vector(values)

    def __repr__(self):
        return f"{type(self).__name__}()"


class ReLU(Activation):
    """
    Rectified Linear Unit: f(x) = max(0, x)

    Derivative (from output):
        f'(y) = 1 if y > 0 else 0
    """

    name = 'relu'

    def activate(self, x):
        return x if x > 0.0 else 0.0

    def derivative(self, y):
        return 1.0 if y > 0.0 else 0.0


class Sigmoid(Activation):
    """
    Sigmoid: f(x) = 1 / (1 + exp(-x))

    Squashes output to (0, 1).

    Derivative (from output):
        f'(y) = y * (1 - y)
    """

    name = 'sigmoid'

    def activate(self, x):
        # Clip so math.exp cannot overflow
        x = min(max(x, -500.0), 500.0)
        return 1.0 / (1.0 + math.exp(-x))

    def derivative(self, y):
        return y * (1.0 - y)


class Softmax(Sigmoid):
    """
    Softmax: f(x_i) = exp(x_i) / sum(exp(x_j))

    Converts a vector of scores into a probability distribution. Only
    ``activate_vector`` normalizes; the scalar form has no vector to normalize
    over and is the logistic function, as is the derivative.

    Numerical Stability:
        max(x) is subtracted before exp, which leaves the result unchanged
        but prevents overflow. If the exponential sum still falls below
        SOFTMAX_EPSILON the uniform distribution is returned.
    """

    name = 'softmax'

    def activate_vector(self, values):
        x = np.asarray(values, dtype=np.float64).reshape(-1)
        if x.size == 0:
            return []

        exp_x = np.exp(x - np.max(x))
        total = np.sum(exp_x)

        if total < SOFTMAX_EPSILON:
            return [1.0 / x.size] * x.size

        return (exp_x / total).tolist()


# ====================================
# Activation Registry
# ====================================

ACTIVATIONS = {
    'relu': ReLU,
    'sigmoid': Sigmoid,
    'logistic': Sigmoid,
    'softmax': Softmax,
}


def get_activation(name):
    """
    Get activation function by name.

    Args:
        name: String name ('relu', 'sigmoid', 'softmax') or Activation instance

    Returns:
        Activation instance

    Example:
        >>> act = get_activation('relu')
        >>> act([-1.0, 0.0, 2.0])
        [0.0, 0.0, 2.0]
    """
    if isinstance(name, Activation):
        return name

    if not isinstance(name, str):
        raise TypeError(f"Expected activation name or Activation, got {type(name).__name__}")

    name_lower = name.lower().replace('-', '_')
    if name_lower not in ACTIVATIONS:
        available = ', '.join(ACTIVATIONS.keys())
        raise ValueError(f"Unknown activation '{name}'. Available: {available}")

    return ACTIVATIONS[name_lower]()
