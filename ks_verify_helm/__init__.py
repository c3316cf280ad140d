"""
ks-verify-helm: check that every chart in a Helm repository renders with ks.
"""

__version__ = "0.1.0"
