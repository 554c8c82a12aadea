"""Customer-support intent resolution: policy overrides, FAQ matching, grounded answers."""

__version__ = "0.1.0"
