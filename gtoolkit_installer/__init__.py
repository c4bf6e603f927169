"""Glamorous Toolkit installer - build a ready-to-run GT image.

This package downloads a Pharo seed image and VM, prepares a workspace and
drives the Pharo VM to load Glamorous Toolkit into the image.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
