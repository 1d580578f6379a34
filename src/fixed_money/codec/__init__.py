"""Serialization adapters for Money: binary layout, text form, SQL values and DataFrames."""
