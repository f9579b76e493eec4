"""Secret Spreader: replicate annotated secrets into other namespaces."""

__version__ = "0.1.0"
