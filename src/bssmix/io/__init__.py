"""Audio and corpus input/output helpers."""
