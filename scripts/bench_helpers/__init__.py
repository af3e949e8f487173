"""Helper modules for the bench-mode power scheme switcher.

This package contains the components used by the bench-mode entry script,
organised by responsibility: logging, configuration models, the powercfg
service wrapper, identifier resolution and power scheme operations.
"""

from __future__ import annotations
