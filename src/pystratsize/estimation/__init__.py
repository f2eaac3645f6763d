"""Sample size estimation for stratified survey designs."""

from .sample_size import expsize, sample_size_expr

__all__ = ["expsize", "sample_size_expr"]
