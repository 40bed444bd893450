"""
Shared numeric helpers for the analyzers.

All helpers take channel-0 samples as a float64 numpy array and never
return NaN or infinity: empty or degenerate input yields zeros.
"""

from typing import Iterable, Tuple

import numpy as np


def chunk_matrix(samples: np.ndarray, num_chunks: int) -> Tuple[np.ndarray, int]:
    """
    Split samples into ``num_chunks`` equal rows, dropping the remainder.

    Returns:
        (matrix of shape (num_chunks, chunk_size), chunk_size). chunk_size is
        0 when the buffer is shorter than ``num_chunks``.
    """
    chunk_size = len(samples) // num_chunks
    matrix = samples[:num_chunks * chunk_size].reshape(num_chunks, chunk_size)
    return matrix, chunk_size


def safe_divide(numerator, denominator, default: float = 0.0):
    """Elementwise ``numerator / denominator`` with ``default`` where the denominator is 0."""
    numerator = np.asarray(numerator, dtype=np.float64)
    denominator = np.asarray(denominator, dtype=np.float64)
    out = np.full(np.broadcast(numerator, denominator).shape, default, dtype=np.float64)
    np.divide(numerator, denominator, out=out, where=denominator != 0)
    if out.ndim == 0:
        return float(out)
    return out


def lagged_correlations(
    samples: np.ndarray,
    lags: Iterable[int],
    window: int = 1000,
) -> np.ndarray:
    """
    Correlate the first ``window`` samples with themselves shifted by each lag.

    Positions past the end of the buffer count as zero, for the reference
    window as well as for the shifted one.
    """
    lags = np.asarray(list(lags), dtype=np.int64)
    if len(lags) == 0:
        return np.zeros(0)

    padded = np.zeros(window + int(lags.max()))
    usable = min(len(samples), len(padded))
    padded[:usable] = samples[:usable]

    head = padded[:window]
    return np.array([float(head @ padded[lag:lag + window]) for lag in lags])


def mean_abs_step(samples: np.ndarray, limit: int, denominator: float) -> float:
    """Sum of |x[i] - x[i-1]| over the first ``limit`` samples, divided by ``denominator``."""
    head = samples[:limit]
    if len(head) < 2:
        return 0.0
    return float(np.abs(np.diff(head)).sum() / denominator)
