"""
Sonic texture analyzer.

Five 0-100 texture metrics from time-domain proxies over the first 50000
samples: differencing (roughness), an alternating index split
(brightness/warmth), zero crossings (density) and deviation (movement).
"""

import numpy as np

from sonicmind.analyzers.common import mean_abs_step
from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import SampleBuffer, SonicTexture

WINDOW = 50000


def split_brightness(head: np.ndarray) -> float:
    """
    Energy of samples at index % 4 in {2, 3} relative to those in {0, 1},
    times 50. Returns 0 for silence.
    """
    magnitude = np.abs(head)
    low_mask = (np.arange(len(head)) % 4) < 2
    low_sum = float(magnitude[low_mask].sum())
    high_sum = float(magnitude[~low_mask].sum())
    if low_sum + high_sum == 0:
        return 0.0
    return high_sum / (low_sum + 0.001) * 50


def zero_crossings(head: np.ndarray) -> int:
    """Sign changes, counting zero as positive."""
    if len(head) < 2:
        return 0
    non_negative = head >= 0
    return int(np.count_nonzero(non_negative[1:] != non_negative[:-1]))


def classify_texture(
    roughness: float,
    brightness: float,
    warmth: float,
    density: float,
    movement: float,
) -> str:
    """First matching threshold wins."""
    if roughness > 60:
        return "gritty"
    if brightness > 70:
        return "crystalline"
    if warmth > 70:
        return "organic"
    if density > 70:
        return "metallic"
    if movement > 70:
        return "ethereal"
    return "smooth"


@register_analyzer("sonic_texture", "1.0.0", default=SonicTexture.neutral)
def analyze_sonic_texture(buffer: SampleBuffer) -> SonicTexture:
    """Five texture scores from the head window, then a texture class from them."""
    samples = buffer.primary_channel
    head = samples[:WINDOW]

    roughness = mean_abs_step(samples, WINDOW, WINDOW) * 100

    brightness = split_brightness(head)
    # silence has neither brightness nor warmth
    warmth = 100 - brightness if np.any(head) else 0.0

    density = zero_crossings(head) / WINDOW * 200

    mean = float(samples.mean()) if len(samples) else 0.0
    movement = float(np.sqrt(np.sum((head - mean) ** 2) / WINDOW)) * 200

    texture_type = classify_texture(roughness, brightness, warmth, density, movement)

    roughness, brightness, warmth, density, movement = (
        _clamp_percent(v) for v in (roughness, brightness, warmth, density, movement)
    )

    return SonicTexture(
        roughness=roughness,
        brightness=brightness,
        warmth=warmth,
        density=density,
        movement=movement,
        texture_type=texture_type,
        layer_depth=(roughness + density + movement) / 3,
    )


def _clamp_percent(value: float) -> float:
    return float(min(max(value, 0.0), 100.0))
