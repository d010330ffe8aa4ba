"""
scalargrad: a minimal reverse-mode autograd engine over scalar values.

This package provides automatic differentiation over a graph of scalar Values,
plus a small scalar MLP built on top of it.
"""

from scalargrad.engine import Value, InvalidArgument, topological_order, zero_grad
from scalargrad import nn

__version__ = "0.1.0"
