"""HDF5 I/O utilities for bin list persistence."""

from .hdf5 import load_bins_from_hdf5, save_bins_to_hdf5

__all__ = ["save_bins_to_hdf5", "load_bins_from_hdf5"]
