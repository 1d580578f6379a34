"""Exact base-10 fixed-point arithmetic used by the monetary domain."""
