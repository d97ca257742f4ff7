"""
Feed-Forward Neural Networks from Scratch
=========================================

A small dense neural network library built on a NumPy-backed matrix engine.
This library demonstrates the mechanics of:
- Dense matrix algebra with parallel row/element fan-out
- Pluggable activation functions (ReLU, Sigmoid, Softmax)
- Forward and backward propagation through dense layers
- Per-sample gradient descent with shuffled epochs and accuracy reporting
"""

from .exceptions import (NetworkError, DimensionMismatch, SizeMismatch, MissingState,
                         NoInputLayer, AlreadyInitialized, InvalidDataset)
from .matrix import Matrix
from .activations import Activation, ReLU, Sigmoid, Softmax, get_activation
from .layers import Layer
from .losses import MSELoss
from .network import NeuralNetwork
from .parallel import configure, parallel_settings
from .utils import set_random_seed

__version__ = "1.0.0"
__all__ = [
    # Errors
    'NetworkError', 'DimensionMismatch', 'SizeMismatch', 'MissingState',
    'NoInputLayer', 'AlreadyInitialized', 'InvalidDataset',
    # Engine
    'Matrix', 'configure', 'parallel_settings',
    # Activations
    'Activation', 'ReLU', 'Sigmoid', 'Softmax', 'get_activation',
    # Layers and losses
    'Layer', 'MSELoss',
    # Main class
    'NeuralNetwork',
    # Utilities
    'set_random_seed',
]
