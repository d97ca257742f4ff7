"""
Dense Layer
===========

A fully connected layer: an affine transform followed by an elementwise
activation.

Forward:
    z = W . x + b
    y = activation(z)

Backward (given the error e = target - prediction at this layer's output):
    delta = e * activation'(y)          (Hadamard product)
    dW    = delta . x^T
    W    += learning_rate * dW
    b    += learning_rate * delta
    return W^T . delta                  (error for the previous layer)

Because the error is defined as target minus prediction, adding the scaled
gradient moves the weights *down* the squared-error surface.
"""

import logging

from .activations import get_activation
from .exceptions import DimensionMismatch, MissingState
from .matrix import Matrix

logger = logging.getLogger(__name__)


class Layer:
    """
    Fully Connected (Dense) Layer.

    Args:
        input_size: Number of input features
        output_size: Number of output features
        activation: Activation instance or registry name
        rng: numpy.random.Generator for weight initialization (optional)

    Attributes:
        weights: Matrix of shape (output_size, input_size)
        biases: Matrix of shape (output_size, 1)
        last_input, last_output: cached by forward(), consumed by backward()
    """

    def __init__(self, input_size, output_size, activation='sigmoid', rng=None):
        self.input_size = input_size
        self.output_size = output_size
        self.activation = get_activation(activation)

        # Uniform [-1, 1) initialization for both weights and biases
        self.weights = Matrix.random(output_size, input_size, rng)
        self.biases = Matrix.random(output_size, 1, rng)

        self.last_input = None
        self.last_output = None

        logger.debug("Created %r", self)

    def forward(self, x):
        """
        Forward pass: y = activation(W . x + b)

        Args:
            x: Column Matrix of shape (input_size, 1)

        Returns:
            Column Matrix of shape (output_size, 1)

        Raises:
            DimensionMismatch: if x.rows != input_size
        """
        if self.weights.cols != x.rows:
            raise DimensionMismatch(
                f"Layer expects {self.weights.cols} inputs, got {x.rows}")

        self.last_input = x.copy()

        z = Matrix.dot(self.weights, x).add(self.biases)
        output = z.map(self.activation.activate)

        self.last_output = output.copy()
        return output

    def backward(self, output_error, learning_rate):
        """
        Backward pass: update weights in place and return the propagated error.

        Args:
            output_error: (target - prediction) at this layer, shape (output_size, 1)
            learning_rate: Step size

        Returns:
            Error for the previous layer, shape (input_size, 1)

        Raises:
            MissingState: if forward() has not been called since the last backward()
        """
        if self.last_input is None or self.last_output is None:
            raise MissingState("backward() called without a preceding forward()")

        activation_derivative = self.last_output.map(self.activation.derivative)
        delta = Matrix.hadamard(output_error, activation_derivative)

        weight_gradient = Matrix.dot(delta, Matrix.transpose(self.last_input))

        self.weights.add_in_place(weight_gradient.multiply(learning_rate))
        self.biases.add_in_place(delta.multiply(learning_rate))

        self.last_input = None
        self.last_output = None

        return Matrix.dot(Matrix.transpose(self.weights), delta)

    def parameter_count(self):
        return self.weights.data.size + self.biases.data.size

    def __call__(self, x):
        return self.forward(x)

    def __repr__(self):
        return f"Layer({self.input_size}, {self.output_size}, activation={self.activation.name})"
