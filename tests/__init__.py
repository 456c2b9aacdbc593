"""Test package for the Lunar Phase Trainer.

Core modules are tested headlessly with seeded RNGs and fake clocks. The
pygame shell tests use SDL's dummy video driver to avoid opening real
windows. To run these tests, execute ``pytest`` from the project root.
"""
