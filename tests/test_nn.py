import numpy as np
import pytest

from scalargrad import Value, InvalidArgument
from scalargrad.nn import Module, Neuron, Layer, MLP


def test_module_defaults():
    m = Module()
    assert m.parameters() == []
    m.zero_grad()


def test_neuron_linear_gradients():
    n = Neuron(2, nonlin=False, rng=np.random.default_rng(0))
    w0, w1 = n.w[0].data, n.w[1].data

    out = n([3.0, -1.0])
    out.backward()

    assert out.data == pytest.approx(3.0 * w0 - w1)
    assert n.w[0].grad == 3.0
    assert n.w[1].grad == -1.0
    assert n.b.grad == 1.0


def test_neuron_accepts_value_inputs():
    n = Neuron(2, nonlin=False, rng=np.random.default_rng(1))
    x = [Value(1.0), Value(2.0)]

    n(x).backward()

    assert x[0].grad == n.w[0].data
    assert x[1].grad == n.w[1].data


def test_neuron_relu_clamps():
    n = Neuron(1, rng=np.random.default_rng(2))
    n.w[0].data = np.float64(1.0)

    assert n([-5.0]).data == 0.0
    assert n([5.0]).data == 5.0


def test_neuron_weights_in_range():
    n = Neuron(100, rng=np.random.default_rng(3))
    ws = [w.data for w in n.w]

    assert all(-1.0 <= w <= 1.0 for w in ws)
    assert n.b.data == 0.0


def test_neuron_input_size_mismatch():
    n = Neuron(3)
    with pytest.raises(InvalidArgument, match="mismatch"):
        n([1.0, 2.0])


def test_layer_outputs_one_value_per_neuron():
    layer = Layer(3, 4, rng=np.random.default_rng(0))
    out = layer([1.0, 2.0, 3.0])

    assert len(out) == 4
    assert all(isinstance(o, Value) for o in out)
    assert len(layer.parameters()) == 4 * (3 + 1)


def test_mlp_parameter_count():
    mlp = MLP(2, [16, 16, 1])
    assert len(mlp.parameters()) == 16 * 3 + 16 * 17 + 17


def test_mlp_last_layer_is_linear():
    mlp = MLP(2, [4, 3])

    assert all(n.nonlin for n in mlp.layers[0].neurons)
    assert not any(n.nonlin for n in mlp.layers[1].neurons)
    assert len(mlp([1.0, 1.0])) == 3


def test_mlp_seeded_init_is_reproducible():
    a = MLP(2, [8, 1], rng=np.random.default_rng(42))
    b = MLP(2, [8, 1], rng=np.random.default_rng(42))

    assert [p.data for p in a.parameters()] == [p.data for p in b.parameters()]
    assert a([0.5, -0.5]).data == b([0.5, -0.5]).data


def test_mlp_parameters_are_shared_not_copied():
    mlp = MLP(2, [3, 1], rng=np.random.default_rng(0))
    params = mlp.parameters()

    assert params[0] is mlp.layers[0].neurons[0].w[0]
    assert params[-1] is mlp.layers[-1].neurons[0].b


def test_mlp_backward_and_zero_grad():
    mlp = MLP(2, [4, 1], rng=np.random.default_rng(7))
    out = mlp([1.0, -2.0])
    out.backward()

    assert mlp.layers[-1].neurons[0].b.grad == 1.0

    mlp.zero_grad()
    assert all(p.grad == 0.0 for p in mlp.parameters())


def test_repr():
    mlp = MLP(2, [2, 1], rng=np.random.default_rng(0))

    assert repr(mlp.layers[0].neurons[0]) == "ReLUNeuron(2)"
    assert repr(mlp.layers[1]) == "Layer of [LinearNeuron(2)]"
    assert repr(mlp) == "MLP(2 -> 2 -> 1)"
