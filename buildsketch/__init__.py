"""BuildSketch backend: construction project lifecycle engine."""
