import logging
from numbers import Real

import numpy as np

logger = logging.getLogger(__name__)

# Float edge cases (x/0, 0*inf, exp overflow) produce inf/nan silently
_IEEE = dict(divide='ignore', over='ignore', invalid='ignore')


class InvalidArgument(ValueError):
    """Raised when an operation is called with an argument it cannot accept."""


class Value:
    """
    A float64 scalar that remembers how it was computed.

    Every arithmetic operation on Values returns a new Value holding the
    operands it was built from and a closure that pushes its gradient back
    into them. Calling backward() on the final Value fills in ``grad`` on
    every Value it depends on.

    A Value is a graph vertex, not a number: equality and hashing are by
    identity, so ``Value(1.0)`` and ``Value(1.0)`` are two separate leaves.
    Plain numbers mixed into an expression become fresh leaves.

    Example:
        >>> w = Value(-3.0)
        >>> x = Value(2.0)
        >>> loss = (w * x).tanh()
        >>> loss.backward()
        >>> w.grad  # x * (1 - tanh(-6)^2)
    """

    def __init__(self, data, _children=(), _op='', name=""):
        """
        Args:
            data: Any real number; stored as np.float64
            _children: Operand Values this node was computed from
            _op: Label of the producing operation, e.g. '*' or 'tanh'
            name: Free-form label shown in repr()
        """
        self.data = np.float64(data)
        self.grad = np.float64(0.0)

        self.name = name

        self._backward = lambda: None
        # dict keys keep first-seen order and dedupe by identity
        self._prev = tuple(dict.fromkeys(_children))
        self._op = _op

    def __add__(self, other):
        other = other if isinstance(other, Value) else Value(other)
        with np.errstate(**_IEEE):
            out = Value(self.data + other.data, (self, other), '+')

        def _backward():
            # both operands see the upstream gradient unchanged
            with np.errstate(**_IEEE):
                self.grad += out.grad
                other.grad += out.grad

        out._backward = _backward
        return out

    def __mul__(self, other):
        """
        Product of two scalars.

        For ``x * x`` both accumulation lines land on the same node, which is
        how the 2x in d(x^2)/dx appears.
        """
        other = other if isinstance(other, Value) else Value(other)
        with np.errstate(**_IEEE):
            out = Value(self.data * other.data, (self, other), '*')

        def _backward():
            with np.errstate(**_IEEE):
                self.grad += other.data * out.grad
                other.grad += self.data * out.grad

        out._backward = _backward
        return out

    def __pow__(self, other):
        """
        Raise to a constant exponent.

        Only plain real numbers (int, float, numpy scalars) are accepted as
        the exponent; a Value exponent would need d/dk, which is not tracked.

        Raises:
            InvalidArgument: if the exponent is a Value, a bool or not a number.
        """
        if isinstance(other, bool) or not isinstance(other, Real):
            raise InvalidArgument(
                f"The power should be a scalar value, got {type(other).__name__}"
            )

        with np.errstate(**_IEEE):
            out = Value(self.data ** other, (self,), f'**{other}')

        def _backward():
            with np.errstate(**_IEEE):
                self.grad += (other * self.data ** (other - 1)) * out.grad

        out._backward = _backward
        return out

    def exp(self):
        """e**x; large inputs overflow to inf."""
        with np.errstate(**_IEEE):
            out = Value(np.exp(self.data), (self,), 'exp')

        def _backward():
            with np.errstate(**_IEEE):
                self.grad += out.data * out.grad

        out._backward = _backward
        return out

    def relu(self):
        """max(0, x). The gradient at exactly 0 is taken as 0."""
        out = Value(np.maximum(0.0, self.data), (self,), 'ReLU')

        def _backward():
            self.grad += out.grad if out.data > 0 else 0.0

        out._backward = _backward
        return out

    def tanh(self):
        out = Value(np.tanh(self.data), (self,), 'tanh')

        def _backward():
            # reuse the forward result: 1 - tanh(x)^2
            with np.errstate(**_IEEE):
                self.grad += (1 - out.data ** 2) * out.grad

        out._backward = _backward
        return out

    def backward(self):
        """
        Fill in ``grad`` on this Value and everything it was computed from.

        Seeds ``self.grad`` with 1, then runs each node's local rule exactly
        once, consumers before the operands they consume. Existing gradients
        on other nodes are added to, not replaced, so running this twice on
        the same graph doubles them; reset with zero_grad() between passes.
        """
        topo = topological_order(self)
        logger.debug("backward from %r over %d nodes", self, len(topo))

        self.grad = np.float64(1.0)

        for v in reversed(topo):
            v._backward()

    def zero_grad(self):
        """Reset this node's gradient to zero."""
        self.grad = np.float64(0.0)

    # Everything below is built from the primitives above

    def __neg__(self):
        return self * -1

    def __radd__(self, other):
        return self + other

    def __sub__(self, other):
        # a + (-b) so b's gradient flows through the same multiply as -b
        return self + (-other)

    def __rsub__(self, other):
        return other + (-self)

    def __rmul__(self, other):
        return self * other

    def __truediv__(self, other):
        """a * b**-1; a zero divisor gives inf or nan, never an exception."""
        other = other if isinstance(other, Value) else Value(other)
        return self * other**-1

    def __rtruediv__(self, other):
        return Value(other) * self**-1

    def __repr__(self):
        label = f"'{self.name}' " if self.name else ""
        origin = f" from {self._op}" if self._op else ""
        return f"Value({label}data={self.data}, grad={self.grad}{origin})"


def topological_order(root):
    """
    Return every Value reachable from root, each one after all of its parents.

    Depth-first, parents first, with an explicit stack so long chains do not hit
    the interpreter's recursion limit. The visited set keys on node identity.

    Args:
        root: The Value to start from (typically the loss)

    Returns:
        list: Values in forward topological order, root last
    """
    topo = []
    visited = set()
    stack = [(root, False)]

    while stack:
        v, expanded = stack.pop()
        if expanded:
            topo.append(v)
            continue
        if v in visited:
            continue
        visited.add(v)
        stack.append((v, True))
        # Reversed so parents are visited in their recorded order
        for child in reversed(v._prev):
            if child not in visited:
                stack.append((child, False))

    return topo


def zero_grad(root):
    """Reset the gradient of every Value reachable from root."""
    for v in topological_order(root):
        v.zero_grad()
