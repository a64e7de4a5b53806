"""CA packages, bundle sources, bundle status, apply patches and trust store encoders."""

__version__ = "0.1.0"
__all__ = ["conditions", "package", "patch", "source", "truststore"]