"""
Core module containing data models, the analyzer registry, buffer loading,
and the analysis engine.

Uses lazy imports for modules with heavy dependencies (librosa).
"""

# Models are lightweight - import directly
from sonicmind.core.models import (
    SampleBuffer,
    HarmonicSignature,
    QuantumBeatGrid,
    EmotionalDNA,
    SynaestheticMap,
    TemporalFractal,
    CrowdEnergySimulation,
    SonicTexture,
    ProbabilityWave,
    DimensionalRift,
    ConsciousnessSync,
    IntelligentAnalysis,
    RemixSuggestion,
)

__all__ = [
    # Models (always available)
    "SampleBuffer",
    "HarmonicSignature",
    "QuantumBeatGrid",
    "EmotionalDNA",
    "SynaestheticMap",
    "TemporalFractal",
    "CrowdEnergySimulation",
    "SonicTexture",
    "ProbabilityWave",
    "DimensionalRift",
    "ConsciousnessSync",
    "IntelligentAnalysis",
    "RemixSuggestion",
    # Lazy loaded
    "BufferLoader",
    "AsyncBufferLoader",
    "create_buffer_loader",
    "Analyzer",
    "FunctionAnalyzer",
    "register_analyzer",
    "IntelligentAnalysisEngine",
    "create_analysis_engine",
]


def __getattr__(name: str):
    """Lazy load modules with heavy dependencies."""
    if name in ("BufferLoader", "AsyncBufferLoader", "create_buffer_loader"):
        from sonicmind.core import loader
        return getattr(loader, name)
    elif name in ("Analyzer", "FunctionAnalyzer", "register_analyzer"):
        from sonicmind.core import analyzer_base
        return getattr(analyzer_base, name)
    elif name in ("IntelligentAnalysisEngine", "create_analysis_engine"):
        from sonicmind.core import engine
        return getattr(engine, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
