"""
Tests for Activation Functions
==============================
"""

import math

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ffnet.activations import ReLU, Sigmoid, Softmax, Activation, get_activation


class TestSigmoid:
    """Tests for the logistic activation."""

    def test_known_values(self):
        sigmoid = Sigmoid()
        assert sigmoid.activate(0.0) == 0.5
        assert abs(sigmoid.activate(2.0) - 0.8807970779778823) < 1e-10
        assert abs(sigmoid.activate(1.0) - 0.7310585786300049) < 1e-10

    def test_derivative_from_output(self):
        sigmoid = Sigmoid()
        for y in [0.0, 0.1, 0.5, 0.9, 1.0]:
            assert sigmoid.derivative(y) == y * (1 - y)
        assert abs(sigmoid.derivative(0.5) - 0.25) < 1e-10

    def test_extreme_inputs(self):
        """Very large magnitudes saturate instead of overflowing."""
        sigmoid = Sigmoid()
        assert sigmoid.activate(-1e6) >= 0.0
        assert sigmoid.activate(-1e6) < 1e-100
        assert sigmoid.activate(1e6) == 1.0


class TestReLU:
    """Tests for the rectifier."""

    def test_activate(self):
        relu = ReLU()
        for x in [-3.0, -0.5, 0.0, 0.5, 7.0]:
            assert relu.activate(x) == max(x, 0.0)

    def test_derivative(self):
        relu = ReLU()
        assert relu.derivative(1.0) == 1.0
        assert relu.derivative(0.0) == 0.0
        assert relu.derivative(-2.0) == 0.0

    def test_vector_is_elementwise(self):
        relu = ReLU()
        assert relu.activate_vector([-1.0, 0.0, 2.0]) == [0.0, 0.0, 2.0]
        assert relu.derivative_vector([0.0, 3.0]) == [0.0, 1.0]


class TestSoftmax:
    """Tests for the normalizing activation."""

    def test_sums_to_one(self):
        softmax = Softmax()
        output = softmax.activate_vector([2.0, 1.0, 0.1])

        assert abs(sum(output) - 1.0) < 1e-10
        assert output[0] > output[1] > output[2]

    def test_shift_invariance(self):
        """Adding a constant to every input leaves the output unchanged."""
        softmax = Softmax()
        x = np.array([0.3, -1.2, 2.5, 0.0])

        base = softmax.activate_vector(x)
        shifted = softmax.activate_vector(x + 123.0)

        np.testing.assert_allclose(shifted, base, atol=1e-12)

    def test_large_inputs_do_not_overflow(self):
        softmax = Softmax()
        output = softmax.activate_vector([1000.0, 1001.0, 1002.0])
        assert all(math.isfinite(v) for v in output)
        assert abs(sum(output) - 1.0) < 1e-10

    def test_equal_very_negative_inputs_are_uniform(self):
        softmax = Softmax()
        output = softmax.activate_vector([-1e300] * 4)
        assert output == [0.25] * 4

    def test_empty(self):
        assert Softmax().activate_vector([]) == []

    def test_scalar_form_is_logistic(self):
        softmax, sigmoid = Softmax(), Sigmoid()
        for x in [-2.0, 0.0, 3.0]:
            assert softmax.activate(x) == sigmoid.activate(x)
        assert softmax.derivative(0.3) == sigmoid.derivative(0.3)

    def test_call_uses_vector_form(self):
        softmax = Softmax()
        assert abs(sum(softmax([1.0, 2.0])) - 1.0) < 1e-10


class TestRegistry:
    """Tests for activation lookup."""

    def test_by_name(self):
        assert isinstance(get_activation('relu'), ReLU)
        assert isinstance(get_activation('Sigmoid'), Sigmoid)
        assert isinstance(get_activation('logistic'), Sigmoid)
        assert isinstance(get_activation('softmax'), Softmax)

    def test_instance_passthrough(self):
        relu = ReLU()
        assert get_activation(relu) is relu

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown activation"):
            get_activation('swish')

    def test_base_class_is_abstract(self):
        with pytest.raises(NotImplementedError):
            Activation().activate(1.0)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
