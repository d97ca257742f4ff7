"""
Neural Network Main Class
=========================

This is the main class that ties everything together:
- Layer stacking (input layer first, then widths chained automatically)
- Forward pass / prediction
- Per-sample backpropagation
- Epoch-based training loop with shuffling
- Accuracy reporting

Construction goes through three states:
    Empty    -> add_input_layer() -> InputSet
    InputSet -> add_layer()       -> Ready
    Ready    -> add_layer()       -> Ready

Training is strictly sequential: one sample at a time, weights updated in place
after every sample. Only individual matrix operations run in parallel.
"""

import logging

import numpy as np
from tqdm import tqdm

from .exceptions import AlreadyInitialized, NoInputLayer
from .layers import Layer
from .losses import MSELoss
from .matrix import Matrix
from .utils import (check_max_samples, is_correct, sample_indices, validate_dataset,
                    validate_sample_widths)

logger = logging.getLogger(__name__)

# Datasets this small are trained in their given order every epoch
SHUFFLE_MIN_SAMPLES = 10
# calculate_accuracy() scores a strided subsample above this many samples
ACCURACY_MAX_SAMPLES = 10000


def report_frequency(epochs):
    """Epoch interval between progress reports."""
    if epochs < 100:
        return 10
    if epochs < 1000:
        return 100
    return epochs // 10


class NeuralNetwork:
    """
    Feed-forward neural network of dense layers.

    Args:
        learning_rate: Step size shared by all layers
        seed: Seed for weight initialization and shuffling (optional)
        max_accuracy_samples: Cap on samples scored by calculate_accuracy()

    Example:
        >>> nn = NeuralNetwork(learning_rate=0.1, seed=0)
        >>> nn.add_input_layer(2, 8, 'relu')
        >>> nn.add_layer(1, 'sigmoid')
        >>> inputs = [[0, 0], [0, 1], [1, 0], [1, 1]]
        >>> targets = [[0], [1], [1], [0]]
        >>> history = nn.fit(inputs, targets, epochs=2000)
        >>> nn.calculate_accuracy(inputs, targets)
    """

    def __init__(self, learning_rate=0.1, seed=None,
                 max_accuracy_samples=ACCURACY_MAX_SAMPLES):
        self.learning_rate = learning_rate
        check_max_samples(max_accuracy_samples)
        self.max_accuracy_samples = max_accuracy_samples
        self.rng = np.random.default_rng(seed)
        self.loss_fn = MSELoss()

        self._layers = []
        self.history = {'loss': [], 'accuracy': []}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @property
    def layers(self):
        return tuple(self._layers)

    @property
    def input_size(self):
        if not self._layers:
            raise NoInputLayer("Network has no input layer")
        return self._layers[0].input_size

    @property
    def output_size(self):
        if not self._layers:
            raise NoInputLayer("Network has no input layer")
        return self._layers[-1].output_size

    def add_input_layer(self, input_size, output_size, activation):
        """
        Add the first layer, fixing the network's input width.

        Raises:
            AlreadyInitialized: if the network already has layers
        """
        if self._layers:
            raise AlreadyInitialized("Input layer must be added first and only once")

        self._layers.append(Layer(input_size, output_size, activation, rng=self.rng))
        logger.debug("Input layer added: %d -> %d", input_size, output_size)

    def add_layer(self, output_size, activation):
        """
        Add a layer whose input width is the previous layer's output width.

        Raises:
            NoInputLayer: if add_input_layer() has not been called
        """
        if not self._layers:
            raise NoInputLayer("Must add an input layer before adding further layers")

        input_size = self._layers[-1].output_size
        self._layers.append(Layer(input_size, output_size, activation, rng=self.rng))
        logger.debug("Layer added: %d -> %d", input_size, output_size)

    # ------------------------------------------------------------------
    # Forward / backward
    # ------------------------------------------------------------------

    def _forward(self, input_array):
        if not self._layers:
            raise NoInputLayer("Network has no layers to run")

        output = Matrix.from_array(input_array)
        for layer in self._layers:
            output = layer.forward(output)
        return output

    def predict(self, input_array):
        """
        Forward pass through every layer.

        Args:
            input_array: Sequence of input_size numbers

        Returns:
            List of output_size floats
        """
        return self._forward(input_array).to_array()

    def train(self, input_array, target_array):
        """
        One gradient step on a single sample.

        The error (target - output) is passed to the last layer's backward()
        and each layer's returned error feeds the layer before it.

        Raises:
            SizeMismatch: if the target width differs from the output width
        """
        output = self._forward(input_array)
        error = self.loss_fn.error(output, target_array)

        for layer in reversed(self._layers):
            error = layer.backward(error, self.learning_rate)

    # ------------------------------------------------------------------
    # Training loop
    # ------------------------------------------------------------------

    def fit(self, inputs, targets, epochs, verbose=False):
        """
        Train with per-sample gradient descent.

        Args:
            inputs: Sequence of input vectors
            targets: Sequence of target vectors (same length as inputs)
            epochs: Number of passes over the data
            verbose: Show a progress bar and periodic loss/accuracy lines

        Returns:
            History dict: 'loss' holds the average loss of every epoch,
            'accuracy' holds (epoch, accuracy) pairs for reported epochs

        Raises:
            InvalidDataset: on empty or length-mismatched data
            NoInputLayer: if the network has no layers
            DimensionMismatch / SizeMismatch: if any sample has the wrong width

        All checks run before any weights are touched.
        """
        validate_dataset(inputs, targets)
        validate_sample_widths(inputs, targets, self.input_size, self.output_size)
        if epochs < 0:
            raise ValueError(f"epochs must be >= 0, got {epochs}")

        self.history = {'loss': [], 'accuracy': []}

        n_samples = len(inputs)
        frequency = report_frequency(epochs)
        indices = np.arange(n_samples)

        epoch_iter = range(epochs)
        if verbose:
            epoch_iter = tqdm(epoch_iter, total=epochs, desc="Training", unit="epoch")

        for epoch in epoch_iter:
            if n_samples > SHUFFLE_MIN_SAMPLES:
                self.rng.shuffle(indices)

            total_loss = 0.0
            for i in indices:
                output = self.predict(inputs[i])
                total_loss += self.loss_fn(output, targets[i])
                self.train(inputs[i], targets[i])

            avg_loss = total_loss / n_samples
            self.history['loss'].append(avg_loss)

            if verbose and (epoch % frequency == 0 or epoch == epochs - 1):
                accuracy = self.calculate_accuracy(inputs, targets)
                self.history['accuracy'].append((epoch + 1, accuracy))
                epoch_iter.set_postfix({'loss': f'{avg_loss:.6f}', 'acc': f'{accuracy:.4f}'})
                tqdm.write(f"Epoch {epoch + 1}/{epochs} - Loss: {avg_loss:.6f} "
                           f"- Accuracy: {accuracy * 100:.2f}%")

        return self.history

    def calculate_accuracy(self, inputs, targets, max_samples=None):
        """
        Fraction of samples whose every output, thresholded at 0.5, matches
        its target within 0.01.

        Large datasets are scored on a strided subsample of ``max_samples``
        (default: the network's max_accuracy_samples).

        Raises:
            InvalidDataset: on empty or length-mismatched data
            ValueError: if max_samples < 1
        """
        validate_dataset(inputs, targets)
        check_max_samples(max_samples)

        if max_samples is None:
            max_samples = self.max_accuracy_samples

        indices = sample_indices(len(inputs), max_samples)

        correct = 0
        for i in indices:
            if is_correct(self.predict(inputs[i]), targets[i]):
                correct += 1

        return correct / len(indices)

    def evaluate(self, inputs, targets):
        """
        Evaluate model on data.

        Returns:
            Tuple of (mean loss, accuracy)
        """
        validate_dataset(inputs, targets)

        total_loss = 0.0
        for x, y in zip(inputs, targets):
            total_loss += self.loss_fn(self.predict(x), y)

        return total_loss / len(inputs), self.calculate_accuracy(inputs, targets)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def summary(self):
        """Build (and log) a table of layers and parameter counts."""
        lines = ["=" * 60, f"{'Layer':<40} {'Params':>15}", "=" * 60]

        total_params = 0
        for i, layer in enumerate(self._layers):
            n_params = layer.parameter_count()
            total_params += n_params
            lines.append(f"{i:3d}. {str(layer):<35} {n_params:>15,}")

        lines.append("-" * 60)
        lines.append(f"Total trainable parameters: {total_params:,}")
        lines.append("=" * 60)

        text = "\n".join(lines)
        logger.info("Model summary:\n%s", text)
        return text

    def __len__(self):
        return len(self._layers)

    def __repr__(self):
        widths = [self._layers[0].input_size] if self._layers else []
        widths += [layer.output_size for layer in self._layers]
        return f"NeuralNetwork(layers={widths}, learning_rate={self.learning_rate})"
