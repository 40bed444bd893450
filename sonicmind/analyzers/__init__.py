"""
Analyzer implementations.

Importing this package registers all ten analyzers; the import order
below is the registry order, which also fixes how per-analyzer random
streams are spawned from a seed.
"""

from sonicmind.analyzers.harmonic import analyze_harmonics
from sonicmind.analyzers.quantum_beat import analyze_quantum_beat
from sonicmind.analyzers.emotional import analyze_emotional_dna
from sonicmind.analyzers.synaesthetic import analyze_synaesthesia
from sonicmind.analyzers.fractal import analyze_temporal_fractal
from sonicmind.analyzers.crowd import analyze_crowd_energy
from sonicmind.analyzers.texture import analyze_sonic_texture
from sonicmind.analyzers.probability import analyze_probability_wave
from sonicmind.analyzers.rift import analyze_dimensional_rift
from sonicmind.analyzers.consciousness import analyze_consciousness_sync

__all__ = [
    "analyze_harmonics",
    "analyze_quantum_beat",
    "analyze_emotional_dna",
    "analyze_synaesthesia",
    "analyze_temporal_fractal",
    "analyze_crowd_energy",
    "analyze_sonic_texture",
    "analyze_probability_wave",
    "analyze_dimensional_rift",
    "analyze_consciousness_sync",
]
