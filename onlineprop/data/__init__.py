"""Dataset helpers for onlineprop."""

from .tables import load_table, make_sine_table, make_xor_table, split_table

__all__ = ["load_table", "make_sine_table", "make_xor_table", "split_table"]
