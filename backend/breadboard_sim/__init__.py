"""Breadboard Simulator — digital-logic simulation engine for a virtual breadboard."""

__version__ = "0.1.0"
