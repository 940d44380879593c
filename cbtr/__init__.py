"""Top-level package for cbtr.

cbtr maps a short invoked command name (an applet alias such as `b`) to the
concrete command configured for the current directory. The resolution entry
point is `resolve`.
"""

from .resolver import resolve

__all__ = ["resolve", "__version__"]

__version__ = "0.3.0"
