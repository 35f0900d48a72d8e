"""Movement analysis for GPS-collared dogs.

This package provides modular building blocks to load GPS fixes, derive
per-step movement metrics, drop implausible fixes, attach land-cover classes,
summarise tracks, and render plots and animations.
"""
