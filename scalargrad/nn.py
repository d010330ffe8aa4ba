"""
Neural network building blocks for scalargrad.

Every weight and bias is its own scalar Value, and every forward pass is
composed from engine operations, so backward() reaches all parameters.
"""

import numpy as np
from scalargrad.engine import Value, InvalidArgument


class Module:
    """Anything that owns trainable leaf Values."""

    def zero_grad(self):
        """
        Set ``grad`` back to 0 on every parameter.

        Value.backward() only ever adds into gradients, so a training loop
        calls this once per step before the next backward pass.
        """
        for p in self.parameters():
            p.zero_grad()

    def parameters(self):
        """The leaf Values an optimizer should update; none by default."""
        return []


class Neuron(Module):
    """
    A single neuron: act = sum(w_i * x_i) + b, optionally passed through ReLU.

    Args:
        nin: Number of inputs
        nonlin: If True, apply ReLU activation (default: True)
        rng: numpy Generator used to draw the weights; pass
             np.random.default_rng(seed) for reproducible initialization

    Example:
        >>> n = Neuron(2, rng=np.random.default_rng(0))
        >>> out = n([1.0, -2.0])
    """

    def __init__(self, nin, nonlin=True, rng=None):
        rng = rng if rng is not None else np.random.default_rng()
        self.w = [Value(w) for w in rng.uniform(-1.0, 1.0, nin)]
        self.b = Value(0.0)
        self.nonlin = nonlin

    def __call__(self, x):
        """
        Forward pass.

        Args:
            x: Sequence of numbers or Values, one per weight

        Raises:
            InvalidArgument: if len(x) does not match the number of weights
        """
        if len(x) != len(self.w):
            raise InvalidArgument(
                f"Input size mismatch: expected {len(self.w)}, got {len(x)}"
            )

        act = self.b
        for wi, xi in zip(self.w, x):
            act = act + wi * xi
        return act.relu() if self.nonlin else act

    def parameters(self):
        return self.w + [self.b]

    def __repr__(self):
        return f"{'ReLU' if self.nonlin else 'Linear'}Neuron({len(self.w)})"


class Layer(Module):
    """
    A fully-connected layer of independent neurons sharing the same inputs.

    Args:
        nin: Number of inputs to each neuron
        nout: Number of neurons (outputs)
        nonlin: If True, every neuron applies ReLU
        rng: numpy Generator shared by all neurons
    """

    def __init__(self, nin, nout, nonlin=True, rng=None):
        rng = rng if rng is not None else np.random.default_rng()
        self.neurons = [Neuron(nin, nonlin=nonlin, rng=rng) for _ in range(nout)]

    def __call__(self, x):
        return [n(x) for n in self.neurons]

    def parameters(self):
        return [p for n in self.neurons for p in n.parameters()]

    def __repr__(self):
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP(Module):
    """
    Stacked Layers feeding each other; ReLU everywhere except the output layer.

    Args:
        nin: Length of each input sample
        nouts: Neuron count per layer, e.g. [16, 16, 1] for 2→16→16→1
        rng: numpy Generator shared by every layer, so one seed fixes
             the whole network's initial weights

    Calling the network on one sample gives a bare Value when the last
    layer has a single neuron (a scalar prediction you can call backward()
    on directly), and a list of Values otherwise.

    Example:
        >>> net = MLP(2, [4, 1], rng=np.random.default_rng(0))
        >>> pred = net([0.5, -1.0])
        >>> net.zero_grad()
        >>> ((pred - 1.0) ** 2).backward()
    """

    def __init__(self, nin, nouts, rng=None):
        rng = rng if rng is not None else np.random.default_rng()
        sz = [nin] + list(nouts)
        self.layers = [
            Layer(sz[i], sz[i + 1], nonlin=i != len(nouts) - 1, rng=rng)
            for i in range(len(nouts))
        ]

    def __call__(self, x):
        for layer in self.layers:
            x = layer(x)
        return x[0] if len(x) == 1 else x

    def parameters(self):
        return [p for layer in self.layers for p in layer.parameters()]

    def __repr__(self):
        sizes = [len(self.layers[0].neurons[0].w)] + [len(l.neurons) for l in self.layers]
        return f"MLP({' -> '.join(map(str, sizes))})"
