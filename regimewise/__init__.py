"""RegimeWise — Old vs New regime income-tax calculator."""

__version__ = "0.1.0"
