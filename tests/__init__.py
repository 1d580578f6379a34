"""
Test package root.

Only this directory has an __init__.py. It makes `tests.helpers` importable from any
test module; the subdirectories work as namespace packages (PEP 420) without one.
"""
