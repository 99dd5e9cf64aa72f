"""Kernel – error hierarchy and control-flow signals."""
