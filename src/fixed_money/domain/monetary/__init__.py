"""Monetary domain package.

This package contains classes for handling monetary amounts and currencies,
including Currency definitions, the currency registry, Money calculations
with exact decimal arithmetic, and template-driven formatting.
"""
