"""
Analysis engine for SonicMind.

Runs every registered analyzer over one sample buffer and joins the
records into an IntelligentAnalysis.
"""

import asyncio
import functools
import logging
import threading
import time
import uuid
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from sonicmind.core.analyzer_base import (
    Analyzer,
    create_analyzers,
    get_registered_analyzers,
)
from sonicmind.core.models import IntelligentAnalysis, RemixSuggestion, SampleBuffer
from sonicmind.utils.errors import (
    AnalysisCancelledError,
    AnalysisError,
    AnalysisTimeoutError,
    InvalidInputError,
)
from sonicmind.utils.logging import create_logger_with_context

# How often the join loop wakes up to check for cancellation (seconds)
POLL_INTERVAL = 0.05


class IntelligentAnalysisEngine:
    """
    Main analysis engine - orchestrates the ten analyzers.

    Design:
    - Dependency Injection: analyzers and suggestion generator injected (testable)
    - Parallel Execution: analyzers run concurrently on a thread pool
    - Isolation: a failing analyzer is replaced by its neutral record
    - Reproducibility: stochastic analyzers draw from streams spawned
      from one seed, in registry order
    """

    def __init__(
        self,
        analyzers: Optional[Sequence[Analyzer]] = None,
        max_workers: int = 4,
        seed: Optional[int] = None,
        timeout: Optional[float] = None,
        parallel: bool = True,
        suggestion_generator: Optional[Any] = None,
    ):
        """
        Initialize analysis engine.

        Args:
            analyzers: Analyzer instances; defaults to every registered analyzer
            max_workers: Max parallel workers
            seed: Default seed for stochastic analyzers (None = fresh entropy per run)
            timeout: Default time budget in seconds for one analysis pass
            parallel: Run analyzers on a thread pool instead of in sequence
            suggestion_generator: Object with ``suggest(analysis)``; defaults to
                the standard rule table
        """
        self.registry = get_registered_analyzers()
        if analyzers is None:
            analyzers = create_analyzers()

        self.analyzers: Dict[str, Analyzer] = {}
        for analyzer in analyzers:
            if analyzer.name not in self.registry:
                raise ValueError(f"Unknown analyzer: {analyzer.name}")
            self.analyzers[analyzer.name] = analyzer

        if suggestion_generator is None:
            from sonicmind.suggestions.generator import SuggestionGenerator
            suggestion_generator = SuggestionGenerator()

        self.seed = seed
        self.timeout = timeout
        self.parallel = parallel
        self.suggestion_generator = suggestion_generator
        self.executor = ThreadPoolExecutor(max_workers=max_workers) if parallel else None
        self.logger = logging.getLogger('engine')

    def analyze(
        self,
        buffer: SampleBuffer,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        seed: Optional[int] = None,
    ) -> IntelligentAnalysis:
        """
        Analyze a sample buffer completely.

        Args:
            buffer: Decoded audio
            timeout: Seconds before the pass is abandoned (overrides the engine default)
            cancel_event: Set from another thread to abandon the pass
            seed: Seed for stochastic analyzers (overrides the engine default)

        Returns:
            IntelligentAnalysis: All ten records plus run metadata

        Raises:
            InvalidInputError: If ``buffer`` is not a SampleBuffer
            AnalysisTimeoutError: If the pass exceeds its time budget
            AnalysisCancelledError: If ``cancel_event`` is set before the join
        """
        if not isinstance(buffer, SampleBuffer):
            raise InvalidInputError(
                f"Expected SampleBuffer, got {type(buffer).__name__}",
                field_name="buffer"
            )

        if timeout is None:
            timeout = self.timeout
        if seed is None:
            seed = self.seed
        seed_sequence = np.random.SeedSequence(seed)

        log = create_logger_with_context('engine', {
            'run_id': uuid.uuid4().hex[:8],
            'channels': buffer.num_channels,
            'samples': buffer.num_samples,
        })
        start_time = time.perf_counter()

        if buffer.is_empty:
            log.warning("Empty sample buffer, analyzers will return fallback values")

        log.info(
            f"Analyzing {buffer.duration:.2f}s buffer with {len(self.analyzers)} analyzers",
            extra={'seed': seed_sequence.entropy},
        )

        rngs = self._spawn_generators(seed_sequence)
        if self.parallel:
            results = self._run_analyzers_parallel(buffer, rngs, timeout, cancel_event, log)
        else:
            results = self._run_analyzers_sequential(buffer, rngs, timeout, cancel_event, log)

        processing_time = time.perf_counter() - start_time
        analysis = self._create_analysis(buffer, results, processing_time, seed_sequence.entropy)

        log.info(
            f"Analysis complete in {processing_time:.3f}s",
            extra={'degraded': analysis.degraded_analyzers},
        )
        return analysis

    async def analyze_async(self, buffer: SampleBuffer, **kwargs: Any) -> IntelligentAnalysis:
        """Run ``analyze`` without blocking the event loop."""
        loop = asyncio.get_running_loop()
        # the default executor, so the engine's own pool stays free for analyzers
        return await loop.run_in_executor(None, functools.partial(self.analyze, buffer, **kwargs))

    def suggest(self, analysis: IntelligentAnalysis) -> List[RemixSuggestion]:
        """Remix suggestions for a finished analysis."""
        return self.suggestion_generator.suggest(analysis)

    def analyze_and_suggest(
        self, buffer: SampleBuffer, **kwargs: Any
    ) -> Tuple[IntelligentAnalysis, List[RemixSuggestion]]:
        analysis = self.analyze(buffer, **kwargs)
        return analysis, self.suggest(analysis)

    def _spawn_generators(self, seed_sequence: np.random.SeedSequence) -> Dict[str, np.random.Generator]:
        """One independent stream per registered analyzer, whether enabled or not."""
        children = seed_sequence.spawn(len(self.registry))
        return {
            name: np.random.default_rng(child)
            for name, child in zip(self.registry, children)
        }

    def _run_analyzers_parallel(
        self,
        buffer: SampleBuffer,
        rngs: Dict[str, np.random.Generator],
        timeout: Optional[float],
        cancel_event: Optional[threading.Event],
        log: logging.LoggerAdapter,
    ) -> Dict[str, Tuple[Any, bool]]:
        """
        Run all analyzers in parallel.

        Returns:
            dict: {name: (result, used_fallback)}
        """
        deadline = time.monotonic() + timeout if timeout is not None else None
        futures: Dict[Future, str] = {
            self.executor.submit(self._run_analyzer, analyzer, buffer, rngs[name], log): name
            for name, analyzer in self.analyzers.items()
        }

        results: Dict[str, Tuple[Any, bool]] = {}
        pending = set(futures)
        while pending:
            wait_for = POLL_INTERVAL
            if cancel_event is not None and cancel_event.is_set():
                self._abandon(pending)
                log.warning("Analysis cancelled")
                raise AnalysisCancelledError(pending=sorted(futures[f] for f in pending))
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    self._abandon(pending)
                    log.error(f"Analysis timed out after {timeout:.3f}s")
                    raise AnalysisTimeoutError(timeout, pending=sorted(futures[f] for f in pending))
                wait_for = min(wait_for, remaining)

            done, pending = wait(pending, timeout=wait_for, return_when=FIRST_COMPLETED)
            for future in done:
                name = futures[future]
                results[name] = future.result()
                log.debug(f"{name} complete (fallback: {results[name][1]})")

        return results

    def _run_analyzers_sequential(
        self,
        buffer: SampleBuffer,
        rngs: Dict[str, np.random.Generator],
        timeout: Optional[float],
        cancel_event: Optional[threading.Event],
        log: logging.LoggerAdapter,
    ) -> Dict[str, Tuple[Any, bool]]:
        """Run analyzers one after another, checking budget and cancellation in between."""
        deadline = time.monotonic() + timeout if timeout is not None else None
        names = list(self.analyzers)

        results: Dict[str, Tuple[Any, bool]] = {}
        for index, name in enumerate(names):
            if cancel_event is not None and cancel_event.is_set():
                log.warning("Analysis cancelled")
                raise AnalysisCancelledError(pending=sorted(names[index:]))
            if deadline is not None and time.monotonic() >= deadline:
                log.error(f"Analysis timed out after {timeout:.3f}s")
                raise AnalysisTimeoutError(timeout, pending=sorted(names[index:]))

            results[name] = self._run_analyzer(self.analyzers[name], buffer, rngs[name], log)
        return results

    def _run_analyzer(
        self,
        analyzer: Analyzer,
        buffer: SampleBuffer,
        rng: np.random.Generator,
        log: logging.LoggerAdapter,
    ) -> Tuple[Any, bool]:
        """
        Run single analyzer, substituting its neutral record on failure.

        Returns:
            Tuple: (result, used_fallback)
        """
        try:
            return analyzer.analyze(buffer, rng=rng), False
        except AnalysisError as e:
            log.warning(
                f"{analyzer.name} failed, using neutral record: {e}",
                extra={'analyzer': analyzer.name},
            )
        except Exception as e:
            # analyzers not built on FunctionAnalyzer may raise anything
            log.warning(
                f"{analyzer.name} raised {type(e).__name__}, using neutral record: {e}",
                extra={'analyzer': analyzer.name},
            )
        return analyzer.default(buffer), True

    def _abandon(self, pending: set) -> None:
        # running analyzers cannot be interrupted; they finish and are discarded
        for future in pending:
            future.cancel()

    def _create_analysis(
        self,
        buffer: SampleBuffer,
        results: Dict[str, Tuple[Any, bool]],
        processing_time: float,
        seed: Any,
    ) -> IntelligentAnalysis:
        """
        Create IntelligentAnalysis from individual analyzer results.

        Disabled analyzers contribute their neutral record and count as
        fallbacks.
        """
        records: Dict[str, Any] = {}
        used_fallback: Dict[str, bool] = {}
        for name, spec in self.registry.items():
            if name in results:
                records[name], used_fallback[name] = results[name]
            else:
                records[name], used_fallback[name] = spec.default(buffer.duration), True

        analyzer_versions = {
            name: getattr(analyzer, 'version', "1.0.0")
            for name, analyzer in self.analyzers.items()
        }

        return IntelligentAnalysis(
            **records,
            duration=buffer.duration,
            processing_time=processing_time,
            seed=seed,
            analyzer_versions=analyzer_versions,
            used_fallback=used_fallback,
        )

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown thread pool; ``wait=False`` leaves abandoned analyzers running."""
        self.logger.info("Shutting down analysis engine")
        if self.executor is not None:
            self.executor.shutdown(wait=wait, cancel_futures=not wait)

    def __enter__(self) -> "IntelligentAnalysisEngine":
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Cleanup on context exit; don't block on a timed-out or cancelled pass."""
        self.shutdown(wait=exc_type is None)


def create_analysis_engine(config: Optional[Dict[str, Any]] = None) -> IntelligentAnalysisEngine:
    """
    Factory function to create a fully configured analysis engine.

    Args:
        config: Configuration dict (see ``get_default_config``)

    Returns:
        IntelligentAnalysisEngine: Ready-to-use engine
    """
    from sonicmind.suggestions.generator import create_suggestion_generator

    config = config or {}
    engine_config = config.get('engine', {}) or {}

    return IntelligentAnalysisEngine(
        analyzers=create_analyzers(config),
        max_workers=engine_config.get('max_workers', 4),
        seed=engine_config.get('seed'),
        timeout=engine_config.get('timeout'),
        parallel=engine_config.get('parallel', True),
        suggestion_generator=create_suggestion_generator(config),
    )


def analyze(
    buffer: SampleBuffer,
    seed: Optional[int] = None,
    timeout: Optional[float] = None,
) -> IntelligentAnalysis:
    """One-shot analysis with the default analyzers."""
    with IntelligentAnalysisEngine(seed=seed, timeout=timeout) as engine:
        return engine.analyze(buffer)


def suggest(analysis: IntelligentAnalysis) -> List[RemixSuggestion]:
    """Remix suggestions from the standard rule table."""
    from sonicmind.suggestions.generator import SuggestionGenerator
    return SuggestionGenerator().suggest(analysis)
