from .ecdf import as_distribution, build_ecdf, data_range_of

__all__ = ["as_distribution", "build_ecdf", "data_range_of"]
