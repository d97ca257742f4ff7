"""
Utility Functions
=================

Helpers for:
- Dataset validation
- Accuracy (thresholded exact-match) scoring
- Reproducibility
"""

import logging

import numpy as np

from .exceptions import DimensionMismatch, InvalidDataset, SizeMismatch

logger = logging.getLogger(__name__)

# An output component counts as "on" above this value
ACCURACY_THRESHOLD = 0.5
# Allowed gap between a thresholded output and its target
ACCURACY_TOLERANCE = 0.01


def validate_dataset(inputs, targets):
    """
    Check that inputs and targets are non-empty and the same length.

    Raises:
        InvalidDataset: on empty or length-mismatched data
    """
    if inputs is None or targets is None:
        raise InvalidDataset("Inputs and targets must be provided")

    n_inputs, n_targets = len(inputs), len(targets)
    if n_inputs == 0 or n_targets == 0:
        raise InvalidDataset("Inputs and targets must not be empty")
    if n_inputs != n_targets:
        raise InvalidDataset(f"Got {n_inputs} inputs but {n_targets} targets")


def validate_sample_widths(inputs, targets, input_size, output_size):
    """
    Check every sample against the network's input and output widths.

    Runs before training so a malformed sample anywhere in the dataset is
    rejected before any weights change.

    Raises:
        DimensionMismatch: if an input does not have ``input_size`` values
        SizeMismatch: if a target does not have ``output_size`` values
    """
    for i, (x, y) in enumerate(zip(inputs, targets)):
        n_in, n_out = np.size(x), np.size(y)
        if n_in != input_size:
            raise DimensionMismatch(
                f"Sample {i}: input has {n_in} values, network expects {input_size}")
        if n_out != output_size:
            raise SizeMismatch(
                f"Sample {i}: target has {n_out} values, network outputs {output_size}")


def check_max_samples(max_samples):
    """Reject a subsample cap that would leave nothing to score."""
    if max_samples is not None and max_samples < 1:
        raise ValueError(f"max_samples must be >= 1, got {max_samples}")


def sample_indices(n_samples, max_samples=None):
    """
    Indices used for scoring.

    All of them when ``max_samples`` is None or not exceeded, otherwise
    ``max_samples`` indices taken with a fixed stride from the start.

    Raises:
        ValueError: if max_samples < 1
    """
    check_max_samples(max_samples)
    if max_samples is None or n_samples <= max_samples:
        return list(range(n_samples))

    step = n_samples // max_samples
    return [i * step for i in range(max_samples)]


def is_correct(output, target, threshold=ACCURACY_THRESHOLD, tolerance=ACCURACY_TOLERANCE):
    """
    True when every output component, thresholded to 0/1, matches its target.

    For one-hot targets this requires an exact one-hot prediction; it is not
    an argmax comparison.

    Raises:
        SizeMismatch: if output and target widths differ
    """
    output = np.asarray(output, dtype=np.float64).reshape(-1)
    target = np.asarray(target, dtype=np.float64).reshape(-1)

    if output.size != target.size:
        raise SizeMismatch(f"Output has {output.size} values, target has {target.size}")

    predicted = np.where(output > threshold, 1.0, 0.0)
    return bool(np.all(np.abs(predicted - target) <= tolerance))


def set_random_seed(seed):
    """Seed the global NumPy state used when no generator is passed."""
    np.random.seed(seed)
    logger.info("Random seed set to %s", seed)
