"""
Core data models for SonicMind.

Immutable domain models: the input sample buffer, the ten analysis
records, their aggregate, and remix suggestions.
"""

from __future__ import annotations

import json
import math
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from sonicmind.utils.errors import InvalidInputError

# Lock for the lazily converted primary channel (shared across all buffers)
_primary_lock = threading.Lock()


# Fixed palettes and label sets

# (name, low Hz, high Hz, color)
FREQUENCY_BANDS: Tuple[Tuple[str, float, float, str], ...] = (
    ("sub-bass", 20.0, 60.0, "#1a0033"),
    ("bass", 60.0, 250.0, "#4400ff"),
    ("low-mid", 250.0, 500.0, "#00ff88"),
    ("mid", 500.0, 2000.0, "#ffff00"),
    ("high-mid", 2000.0, 4000.0, "#ff8800"),
    ("high", 4000.0, 8000.0, "#ff0044"),
    ("ultra-high", 8000.0, 20000.0, "#ffffff"),
)

# Declaration order doubles as the tie-break order for the color signature.
EMOTIONS: Tuple[str, ...] = (
    "euphoric", "tense", "peaceful", "melancholic", "energetic", "neutral",
)

EMOTION_COLORS: Dict[str, str] = {
    "euphoric": "#ff00ff",
    "energetic": "#ff4400",
    "melancholic": "#0044ff",
    "peaceful": "#00ff88",
    "tense": "#ff0000",
    "mysterious": "#440088",
    "triumphant": "#ffcc00",
    "nostalgic": "#ff8866",
}
NEUTRAL_COLOR = "#888888"

# More rows than this means the array arrived as (samples, channels)
MAX_CHANNELS = 32

TEXTURE_PROFILES: Tuple[str, ...] = (
    "silk", "velvet", "sandpaper", "glass", "water", "lightning",
)

TEXTURE_TYPES: Tuple[str, ...] = (
    "gritty", "crystalline", "organic", "metallic", "ethereal", "smooth",
)

RIFT_TYPES: Tuple[str, ...] = ("temporal", "harmonic", "textural", "spatial")

ALTERNATE_REALITIES: Tuple[str, ...] = (
    "Mirror Universe",
    "Reversed Timeline",
    "Harmonic Dimension",
    "Void Space",
    "Echo Realm",
)

BRAINWAVE_BANDS: Tuple[str, ...] = ("delta", "theta", "alpha", "beta", "gamma")

BRAINWAVE_INFO: Dict[str, Dict[str, str]] = {
    "delta": {"range": "0.5-4 Hz", "state": "Deep Sleep", "color": "#4400ff"},
    "theta": {"range": "4-8 Hz", "state": "Meditation", "color": "#00ff88"},
    "alpha": {"range": "8-13 Hz", "state": "Relaxed Focus", "color": "#ffcc00"},
    "beta": {"range": "13-30 Hz", "state": "Active Thinking", "color": "#ff8800"},
    "gamma": {"range": "30-100 Hz", "state": "Peak Performance", "color": "#ff00ff"},
}

IMPACT_LEVELS: Tuple[str, ...] = ("subtle", "moderate", "dramatic", "reality-bending")


# Input

@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """
    Immutable decoded audio handed to the analysis core.

    ``channel_data`` is always shaped (channels, samples) and read-only.
    Every analyzer reads channel 0 only; other channels are carried for
    callers but never mixed down.
    """

    channel_data: np.ndarray
    sample_rate: float
    duration: float
    source: Optional[str] = None  # file name when decoded from disk

    # Lazy float64 copy of channel 0
    _primary: Optional[np.ndarray] = field(
        default=None, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        """Take a private read-only float32 copy, then validate shape, rate and duration."""
        data = np.array(self.channel_data, dtype=np.float32)
        data.setflags(write=False)
        object.__setattr__(self, "channel_data", data)

        if data.ndim != 2:
            raise InvalidInputError(
                f"channel_data must be 2-D (channels, samples), got {data.ndim}-D",
                field_name="channel_data",
            )
        if data.shape[0] < 1:
            raise InvalidInputError("Buffer needs at least one channel", field_name="channel_data")
        if data.shape[0] > MAX_CHANNELS:
            raise InvalidInputError(
                f"{data.shape[0]} channels exceeds {MAX_CHANNELS}; expected (channels, samples), "
                f"transpose (samples, channels) arrays such as soundfile output",
                field_name="channel_data",
            )
        if not (math.isfinite(self.sample_rate) and self.sample_rate > 0):
            raise InvalidInputError(
                f"Sample rate must be positive, got {self.sample_rate}",
                field_name="sample_rate",
            )
        if not (math.isfinite(self.duration) and self.duration >= 0):
            raise InvalidInputError(
                f"Duration must be non-negative, got {self.duration}",
                field_name="duration",
            )

    @classmethod
    def from_array(
        cls,
        data: Any,
        sample_rate: float,
        duration: Optional[float] = None,
        source: Optional[str] = None,
    ) -> "SampleBuffer":
        """
        Build a buffer from a 1-D (mono) or 2-D (channels, samples) array.

        Rows are channels. Arrays laid out (samples, channels), as
        ``soundfile.read`` returns them, must be transposed first::

            data, rate = soundfile.read("take.wav")   # shape (n, 2)
            buffer = SampleBuffer.from_array(data.T, rate)

        More than ``MAX_CHANNELS`` rows is rejected as a transposed array.
        The caller's array is copied, never frozen or modified.

        Args:
            data: Sample values, any array-like of floats
            sample_rate: Samples per second
            duration: Seconds; defaults to samples / sample_rate
            source: Optional label (e.g. file name)

        Raises:
            InvalidInputError: If the array rank, orientation or rate is unusable
        """
        array = np.asarray(data, dtype=np.float32)
        if array.ndim == 1:
            array = array[np.newaxis, :]
        if array.ndim != 2:
            raise InvalidInputError(
                f"Sample data must be 1-D or 2-D, got {array.ndim}-D",
                field_name="channel_data",
            )

        if duration is None:
            duration = array.shape[1] / sample_rate if sample_rate > 0 else 0.0

        return cls(
            channel_data=array,
            sample_rate=float(sample_rate),
            duration=float(duration),
            source=source,
        )

    @property
    def num_channels(self) -> int:
        return int(self.channel_data.shape[0])

    @property
    def num_samples(self) -> int:
        return int(self.channel_data.shape[1])

    @property
    def is_empty(self) -> bool:
        return self.num_samples == 0

    @property
    def primary_channel(self) -> np.ndarray:
        """Channel 0 as a read-only float64 array (thread-safe, computed once)."""
        if self._primary is None:
            with _primary_lock:
                if self._primary is None:
                    primary = self.channel_data[0].astype(np.float64)
                    primary.setflags(write=False)
                    object.__setattr__(self, '_primary', primary)
        return self._primary


# Analysis records

@dataclass(frozen=True)
class HarmonicSignature:
    """Fundamental, harmonic series and time-sliced dissonance."""

    fundamental_freq: float  # Hz
    harmonics: Tuple[float, ...]  # fundamental x 1..8
    harmonic_ratios: Tuple[float, ...]
    consonance_score: float  # nominally 0-100, unclamped (may be negative)
    dissonance_map: Tuple[float, ...]  # 100 slices

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "HarmonicSignature":
        """The 440 Hz fallback the analyzer reports when nothing correlates."""
        from sonicmind.analyzers.harmonic import consonance_score

        fundamental = 440.0
        ratios = tuple(float(k) for k in range(1, 9))
        return cls(
            fundamental_freq=fundamental,
            harmonics=tuple(fundamental * k for k in range(1, 9)),
            harmonic_ratios=ratios,
            consonance_score=float(consonance_score(ratios)),
            dissonance_map=(0.0,) * 100,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QuantumBeatGrid:
    """Onset micro-timing against a 120 BPM grid."""

    micro_timings: Tuple[float, ...]  # ms, at most 32
    groove_pattern: Tuple[float, ...]  # 0-1, same length
    swing_factor: float  # 0-100
    syncopation_index: float  # 0-100
    polyrhythm_layers: Tuple[Tuple[float, ...], ...]  # strides 4, 3, 5
    quantum_entanglement: float  # 0-100

    def __post_init__(self) -> None:
        validate_percentage("swing_factor", self.swing_factor)
        validate_percentage("syncopation_index", self.syncopation_index)
        validate_percentage("quantum_entanglement", self.quantum_entanglement)

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "QuantumBeatGrid":
        return cls(
            micro_timings=(),
            groove_pattern=(),
            swing_factor=0.0,
            syncopation_index=0.0,
            polyrhythm_layers=((), (), ()),
            quantum_entanglement=0.0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EmotionalPoint:
    """One point of the emotional arc."""

    time: float  # seconds
    emotion: str
    intensity: float  # 0-1


@dataclass(frozen=True)
class EmotionalDNA:
    """Valence/arousal/dominance plus a 100-point emotional arc."""

    valence: float  # [-1, 1]
    arousal: float  # [-1, 1]
    dominance: float  # [-1, 1]
    tension: float
    release: float
    emotional_arc: Tuple[EmotionalPoint, ...]  # 100 points
    color_signature: str

    def __post_init__(self) -> None:
        for name in ("valence", "arousal", "dominance"):
            validate_range(name, getattr(self, name), -1.0, 1.0)

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "EmotionalDNA":
        return cls(
            valence=0.0,
            arousal=0.0,
            dominance=0.0,
            tension=0.0,
            release=0.0,
            emotional_arc=tuple(
                EmotionalPoint(time=(i / 100) * duration, emotion="neutral", intensity=0.0)
                for i in range(100)
            ),
            color_signature=NEUTRAL_COLOR,
        )

    def point_at(self, current_time: float, duration: float) -> Optional[EmotionalPoint]:
        """Arc point under the playhead, or None without an arc or duration."""
        if not self.emotional_arc or duration <= 0:
            return None
        return self.emotional_arc[
            _timeline_index(current_time, duration, len(self.emotional_arc))
        ]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FrequencyColor:
    freq: float  # band center, Hz
    color: str
    intensity: float  # 0-1


@dataclass(frozen=True)
class SpatialPosition:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class SynaestheticMap:
    """Color per frequency band, texture label and spatial placement."""

    frequency_colors: Tuple[FrequencyColor, ...]  # 7 bands
    texture_profile: str
    spatial_position: SpatialPosition
    synesthesia_type: str = "chromesthesia"

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "SynaestheticMap":
        return cls(
            frequency_colors=tuple(
                FrequencyColor(freq=(low + high) / 2, color=color, intensity=0.5)
                for _, low, high, color in FREQUENCY_BANDS
            ),
            texture_profile=TEXTURE_PROFILES[0],
            spatial_position=SpatialPosition(x=0.0, y=0.0, z=0.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RecursivePattern:
    start_time: float  # seconds
    duration: float  # seconds
    repetition_scale: int  # 2, 4 or 8
    similarity: float  # percent, > 60


@dataclass(frozen=True)
class TemporalFractal:
    """Box-counting dimension and self-similar windows."""

    fractal_dimension: float  # [0, 2]
    self_similarity_score: float  # 0-100
    recursive_patterns: Tuple[RecursivePattern, ...]
    infinite_zoom_points: Tuple[float, ...]

    def __post_init__(self) -> None:
        validate_range("fractal_dimension", self.fractal_dimension, 0.0, 2.0)
        validate_percentage("self_similarity_score", self.self_similarity_score)

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "TemporalFractal":
        return cls(
            fractal_dimension=0.0,
            self_similarity_score=0.0,
            recursive_patterns=(),
            infinite_zoom_points=(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BuildupZone:
    start: float  # seconds
    end: float  # seconds
    intensity: float  # 0-100


@dataclass(frozen=True)
class CrowdEnergySimulation:
    """Normalized energy curve and simulated crowd reaction."""

    energy_curve: Tuple[float, ...]  # 200 values, 0-100
    peak_moments: Tuple[float, ...]  # seconds
    buildup_zones: Tuple[BuildupZone, ...]
    drop_impact: Tuple[float, ...]  # seconds
    crowd_response_delay: float  # seconds, 0.2-0.5
    mosh_pit_probability: float  # 0-100

    def __post_init__(self) -> None:
        validate_percentage("mosh_pit_probability", self.mosh_pit_probability)

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "CrowdEnergySimulation":
        return cls(
            energy_curve=(0.0,) * 200,
            peak_moments=(),
            buildup_zones=(),
            drop_impact=(),
            crowd_response_delay=0.2,
            mosh_pit_probability=0.0,
        )

    def energy_at(self, current_time: float, duration: float) -> float:
        """Energy value under the playhead (0 without a curve or duration)."""
        if not self.energy_curve or duration <= 0:
            return 0.0
        return self.energy_curve[
            _timeline_index(current_time, duration, len(self.energy_curve))
        ]

    def is_near_peak(self, current_time: float, window: float = 2.0) -> bool:
        return any(abs(peak - current_time) < window for peak in self.peak_moments)

    def buildup_at(self, current_time: float) -> Optional[BuildupZone]:
        for zone in self.buildup_zones:
            if zone.start <= current_time <= zone.end:
                return zone
        return None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SonicTexture:
    """Time-domain texture proxies."""

    roughness: float
    brightness: float
    warmth: float
    density: float
    movement: float
    texture_type: str
    layer_depth: float

    def __post_init__(self) -> None:
        for name in ("roughness", "brightness", "warmth", "density", "movement", "layer_depth"):
            validate_percentage(name, getattr(self, name))
        if self.texture_type not in TEXTURE_TYPES:
            raise ValueError(
                f"Invalid texture type: {self.texture_type}. Must be one of {TEXTURE_TYPES}"
            )

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "SonicTexture":
        return cls(
            roughness=0.0,
            brightness=0.0,
            warmth=0.0,
            density=0.0,
            movement=0.0,
            texture_type="smooth",
            layer_depth=0.0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SuperpositionState:
    id: str
    probability: float
    audio_variant: str


@dataclass(frozen=True)
class UncertaintyZone:
    start: float  # seconds
    end: float  # seconds
    entropy: float


@dataclass(frozen=True)
class ProbabilityWave:
    """Synthetic probability envelope and fixed variant states."""

    wave_function: Tuple[float, ...]  # 100 samples
    superposition_states: Tuple[SuperpositionState, ...]
    collapse_points: Tuple[float, ...]  # seconds
    uncertainty_zones: Tuple[UncertaintyZone, ...]

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "ProbabilityWave":
        """Same record the generator gives: it depends on the duration only."""
        from sonicmind.analyzers.probability import probability_wave_for
        return probability_wave_for(duration)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RiftPoint:
    time: float  # seconds
    intensity: float  # 0-100
    rift_type: str
    alternate_reality: str


@dataclass(frozen=True)
class DimensionalRift:
    """Energy discontinuities labelled as rifts."""

    rift_points: Tuple[RiftPoint, ...]  # at most 10
    parallel_timelines: int  # 0-7
    dimensional_bleed: float  # 0-100
    reality_stability: float  # 0-100

    def __post_init__(self) -> None:
        validate_percentage("dimensional_bleed", self.dimensional_bleed)
        validate_percentage("reality_stability", self.reality_stability)

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "DimensionalRift":
        return cls(
            rift_points=(),
            parallel_timelines=0,
            dimensional_bleed=0.0,
            reality_stability=100.0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ConsciousnessSync:
    """Dominant rhythm mapped onto a brainwave band."""

    brainwave_target: str
    binaural_offset: float  # Hz
    isochronic_pulse: float  # Hz
    entrainment_strength: float  # 0-100
    flow_state_score: float  # 0-100
    meditation_depth: float  # 80 or 40

    def __post_init__(self) -> None:
        if self.brainwave_target not in BRAINWAVE_BANDS:
            raise ValueError(
                f"Invalid brainwave band: {self.brainwave_target}. "
                f"Must be one of {BRAINWAVE_BANDS}"
            )
        validate_percentage("entrainment_strength", self.entrainment_strength)
        validate_percentage("flow_state_score", self.flow_state_score)

    @property
    def brainwave_info(self) -> Dict[str, str]:
        """Range, mental state and display color of the target band."""
        return dict(BRAINWAVE_INFO[self.brainwave_target])

    @classmethod
    def neutral(cls, duration: float = 0.0) -> "ConsciousnessSync":
        return cls(
            brainwave_target="delta",
            binaural_offset=1.5,
            isochronic_pulse=0.0,
            entrainment_strength=0.0,
            flow_state_score=0.0,
            meditation_depth=40.0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Aggregate

@dataclass(frozen=True)
class IntelligentAnalysis:
    """Complete output of one analysis pass over a sample buffer."""

    harmonic_signature: HarmonicSignature
    quantum_beat_grid: QuantumBeatGrid
    emotional_dna: EmotionalDNA
    synaesthetic_map: SynaestheticMap
    temporal_fractal: TemporalFractal
    crowd_energy: CrowdEnergySimulation
    sonic_texture: SonicTexture
    probability_wave: ProbabilityWave
    dimensional_rift: DimensionalRift
    consciousness_sync: ConsciousnessSync

    # Metadata
    duration: float = 0.0
    processing_time: float = 0.0  # seconds
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    seed: Optional[int] = None
    analyzer_versions: Dict[str, str] = field(default_factory=dict)
    used_fallback: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = asdict(self)
        result['timestamp'] = self.timestamp.isoformat()
        return result

    def to_json(self, indent: int = 2) -> str:
        """Export as JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def is_complete(self) -> bool:
        """True when no analyzer had to be replaced by its neutral record."""
        return not any(self.used_fallback.values())

    @property
    def degraded_analyzers(self) -> List[str]:
        return [name for name, used in self.used_fallback.items() if used]

    def get_summary(self) -> str:
        """Human-readable one-line summary."""
        parts = [
            f"Fundamental: {self.harmonic_signature.fundamental_freq:.1f} Hz",
            f"Texture: {self.sonic_texture.texture_type}",
            f"Color: {self.emotional_dna.color_signature}",
            f"Brainwave: {self.consciousness_sync.brainwave_target}",
            f"Mosh pit: {self.crowd_energy.mosh_pit_probability:.0f}%",
            f"Stability: {self.dimensional_rift.reality_stability:.0f}%",
        ]
        if self.degraded_analyzers:
            parts.append(f"Degraded: {', '.join(self.degraded_analyzers)}")
        return " | ".join(parts)


# Suggestions

@dataclass(frozen=True)
class RemixSuggestion:
    """A recommended transformation with named knob settings."""

    id: str
    name: str
    description: str
    confidence: float  # [0.0, 1.0]
    impact: str
    parameters: Dict[str, float]
    reasoning: str

    def __post_init__(self) -> None:
        """Validate fields."""
        validate_confidence(self.confidence)
        validate_impact(self.impact)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'confidence': self.confidence,
            'impact': self.impact,
            'parameters': dict(self.parameters),
            'reasoning': self.reasoning,
        }


# Validation helpers

def validate_range(name: str, value: float, low: float, high: float) -> None:
    """Validate a bounded metric."""
    if not (low <= value <= high):
        raise ValueError(f"{name} must be in [{low}, {high}], got {value}")


def validate_percentage(name: str, value: float) -> None:
    validate_range(name, value, 0.0, 100.0)


def validate_confidence(confidence: float) -> None:
    """Validate confidence score is in valid range."""
    if not (0.0 <= confidence <= 1.0):
        raise ValueError(f"Confidence must be in [0.0, 1.0], got {confidence}")


def validate_impact(impact: str) -> None:
    """Validate impact is one of the allowed tags."""
    if impact not in IMPACT_LEVELS:
        raise ValueError(f"Invalid impact: {impact}. Must be one of {IMPACT_LEVELS}")


def _timeline_index(current_time: float, duration: float, length: int) -> int:
    index = int(math.floor((current_time / duration) * length))
    return max(0, min(index, length - 1))
