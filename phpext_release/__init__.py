"""Build a PHP extension and attach its PIE binary package to a GitHub release.

Run as a GitHub Action step (see action.yml) or locally:

``python -m phpext_release run --release-tag 1.0.0``
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
