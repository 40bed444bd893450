"""
Synaesthetic mapper.

Assigns a fixed color to each of seven frequency bands, picks a texture
label from sample roughness, and places the sound in space from three
band intensities.

Band intensities are placeholders drawn from [0.3, 0.8) with the injected
generator; no spectral energy is measured. Replacing them with FFT band
energies is an open question and deliberately not done here.
"""

import numpy as np

from sonicmind.analyzers.common import mean_abs_step
from sonicmind.core.analyzer_base import register_analyzer
from sonicmind.core.models import (
    FREQUENCY_BANDS,
    TEXTURE_PROFILES,
    FrequencyColor,
    SampleBuffer,
    SpatialPosition,
    SynaestheticMap,
)

ROUGHNESS_WINDOW = 10000

# indices into FREQUENCY_BANDS driving x (mid), y (high) and z (bass)
SPATIAL_BANDS = (3, 5, 1)


def texture_profile(samples: np.ndarray) -> str:
    roughness = mean_abs_step(samples, ROUGHNESS_WINDOW, ROUGHNESS_WINDOW)
    index = int(np.floor(roughness * len(TEXTURE_PROFILES) * 10)) % len(TEXTURE_PROFILES)
    return TEXTURE_PROFILES[index]


@register_analyzer(
    "synaesthetic_map", "1.0.0", default=SynaestheticMap.neutral, stochastic=True
)
def analyze_synaesthesia(buffer: SampleBuffer, rng: np.random.Generator) -> SynaestheticMap:
    """Fixed band colours with random intensities; the spatial position follows three of them."""
    colors = tuple(
        FrequencyColor(
            freq=(low + high) / 2,
            color=color,
            intensity=float(rng.random() * 0.5 + 0.3),
        )
        for _, low, high, color in FREQUENCY_BANDS
    )

    x, y, z = (colors[i].intensity * 2 - 1 for i in SPATIAL_BANDS)

    return SynaestheticMap(
        frequency_colors=colors,
        texture_profile=texture_profile(buffer.primary_channel),
        spatial_position=SpatialPosition(x=x, y=y, z=z),
    )
