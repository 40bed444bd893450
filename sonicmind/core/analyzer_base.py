"""
Analyzer contract and registry for SonicMind.

Every analyzer is a plain function ``SampleBuffer -> record``. Functions
register themselves with ``register_analyzer`` and the engine wraps each
one in a ``FunctionAnalyzer`` that adds timing, logging and error
translation.
"""

import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, TypeVar

import numpy as np

from sonicmind.core.models import SampleBuffer
from sonicmind.utils.errors import AnalysisError, ConfigurationError

# Type variable for result types
T = TypeVar('T')


class Analyzer(Protocol[T]):
    """
    Structural contract every analyzer satisfies.

    A class doesn't need to inherit from Analyzer to be accepted by the
    engine; it just needs these members.
    """

    @property
    def name(self) -> str:
        """Registry name, also the field name on IntelligentAnalysis."""
        ...

    @property
    def version(self) -> str:
        """Analyzer version for result tracking."""
        ...

    def analyze(self, buffer: SampleBuffer, rng: Optional[np.random.Generator] = None) -> T:
        """
        Analyze the buffer and return a typed record.

        Raises:
            AnalysisError: If analysis fails
        """
        ...

    def default(self, buffer: SampleBuffer) -> T:
        """Neutral record substituted when ``analyze`` fails."""
        ...


@dataclass(frozen=True)
class AnalyzerSpec(Generic[T]):
    """Registration entry for one analyzer function."""

    name: str
    version: str
    func: Callable[..., T]
    default: Callable[[float], T]  # duration -> neutral record
    stochastic: bool = False


_REGISTRY: Dict[str, AnalyzerSpec] = {}


def register_analyzer(
    name: str,
    version: str,
    default: Callable[[float], Any],
    stochastic: bool = False,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator that adds an analyzer function to the registry.

    Stochastic analyzers take the random generator as their second
    positional argument; deterministic ones never see it.

    Example:
        @register_analyzer("sonic_texture", "1.0.0", default=SonicTexture.neutral)
        def analyze_sonic_texture(buffer: SampleBuffer) -> SonicTexture:
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        if name in _REGISTRY and _REGISTRY[name].func is not func:
            raise ValueError(f"Analyzer already registered: {name}")
        _REGISTRY[name] = AnalyzerSpec(
            name=name,
            version=version,
            func=func,
            default=default,
            stochastic=stochastic,
        )
        return func

    return decorator


def get_registered_analyzers() -> Dict[str, AnalyzerSpec]:
    """All registered analyzers, in registration order."""
    # Importing the package runs every @register_analyzer decorator
    import sonicmind.analyzers  # noqa: F401
    return dict(_REGISTRY)


class FunctionAnalyzer(Generic[T]):
    """
    Wraps a registered analyzer function.

    Uses Template Method pattern - analyze() adds timing and error
    translation around the pure function held by the spec.
    """

    def __init__(self, spec: AnalyzerSpec, options: Optional[Dict[str, Any]] = None):
        """
        Args:
            spec: Registry entry to wrap
            options: Keyword options forwarded to the analyzer function
        """
        self.spec = spec
        self.options = dict(options or {})
        self.logger = logging.getLogger(f"analyzer.{spec.name}")

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def version(self) -> str:
        return self.spec.version

    @property
    def stochastic(self) -> bool:
        return self.spec.stochastic

    def analyze(self, buffer: SampleBuffer, rng: Optional[np.random.Generator] = None) -> T:
        """
        Run the analyzer with timing and error handling.

        Raises:
            AnalysisError: If the analyzer function raises
        """
        start_time = time.perf_counter()

        try:
            self.logger.debug(
                f"Starting analysis: {buffer.num_samples} samples @ {buffer.sample_rate:g} Hz"
            )

            if self.spec.stochastic:
                if rng is None:
                    rng = np.random.default_rng()
                result = self.spec.func(buffer, rng, **self.options)
            else:
                result = self.spec.func(buffer, **self.options)

            elapsed = time.perf_counter() - start_time
            self.logger.debug(
                f"Analysis complete in {elapsed:.3f}s",
                extra={"analyzer": self.name, "elapsed_ms": round(elapsed * 1000, 3)},
            )
            return result

        except AnalysisError:
            raise

        except Exception as e:
            self.logger.error(f"Analysis failed: {e}")
            raise AnalysisError(
                f"{self.name} analysis failed: {e}",
                analyzer_name=self.name,
                original_error=e
            ) from e

    def default(self, buffer: SampleBuffer) -> T:
        return self.spec.default(buffer.duration)


def create_analyzers(config: Optional[Dict[str, Any]] = None) -> List[FunctionAnalyzer]:
    """
    Build wrappers for every enabled analyzer, in registration order.

    Args:
        config: Full configuration dict; its ``analyzers`` section maps an
            analyzer name to ``{"enabled": bool, **options}``

    Raises:
        ConfigurationError: If the section names an unknown analyzer or an
            option the analyzer function does not accept
    """
    section = (config or {}).get('analyzers', {}) or {}
    registry = get_registered_analyzers()

    unknown = set(section) - set(registry)
    if unknown:
        raise ConfigurationError(
            f"Unknown analyzers in configuration: {', '.join(sorted(unknown))}",
            config_key="analyzers"
        )

    analyzers = []
    for name, spec in registry.items():
        settings = dict(section.get(name) or {})
        if not settings.pop('enabled', True):
            continue
        _check_options(spec, settings)
        analyzers.append(FunctionAnalyzer(spec, settings))
    return analyzers


def _check_options(spec: AnalyzerSpec, options: Dict[str, Any]) -> None:
    accepted = inspect.signature(spec.func).parameters
    for key in options:
        if key not in accepted:
            raise ConfigurationError(
                f"Analyzer {spec.name} has no option '{key}'",
                config_key=f"analyzers.{spec.name}.{key}"
            )
