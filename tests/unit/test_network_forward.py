import pytest

from stepprop.core.errors import ForwardPassRequired
from stepprop.core.types import node

INPUTS = [0.05, 0.10]
EXPECTED = [0.01, 0.99]


def test_known_forward_values(mazur):
    mazur.feed_inputs(INPUTS)
    out = mazur.outputs()
    assert out == pytest.approx([0.75136507, 0.772928465], abs=1e-6)
    assert mazur.total_error(EXPECTED) == pytest.approx(0.298371109, abs=1e-6)


def test_hidden_layer_caches_input_and_output(mazur):
    mazur.feed_inputs(INPUTS)
    h1 = mazur.layers[1][0]
    assert h1.last_input == pytest.approx(0.3775)
    assert h1.last_output == pytest.approx(0.593269992, abs=1e-8)
    assert [n.last_output for n in mazur.layers[0]] == INPUTS


def test_forward_pass_is_deterministic(mazur):
    mazur.feed_inputs(INPUTS)
    first = mazur.outputs()
    mazur.feed_inputs(INPUTS)
    assert mazur.outputs() == first


def test_stale_values_are_overwritten(mazur_factory):
    fresh = mazur_factory()
    fresh.feed_inputs(INPUTS)

    reused = mazur_factory()
    reused.feed_inputs([1.0, -3.0])
    reused.feed_inputs(INPUTS)
    assert reused.outputs() == fresh.outputs()
    for a, b in zip(reused.layers[1], fresh.layers[1]):
        assert a.last_input == b.last_input


def test_total_error_does_not_run_forward_pass(mazur):
    mazur.feed_inputs(INPUTS)
    before = mazur.total_error(EXPECTED)
    mazur.layers[2][0].weights[0] = 5.0
    assert mazur.total_error(EXPECTED) == before


def test_outputs_require_forward_pass(mazur):
    with pytest.raises(ForwardPassRequired):
        mazur.outputs()
    with pytest.raises(ForwardPassRequired):
        mazur.total_error(EXPECTED)


def test_node_scratch_defaults():
    n = node([0.1, 0.2], 0.3)
    assert n.pending_weight_updates == [0.0, 0.0]
    assert n.pending_bias_update == 0.0
    assert n.error_wrt_input == 0.0
    assert n.last_input == 0.0 and n.last_output == 0.0
    assert node([]).pending_weight_updates == []


def test_from_dims_is_seeded():
    from stepprop.core.activations import identity, identity_deriv
    from stepprop.core.network import Network
    from stepprop.training.losses import squared, squared_deriv

    kwargs = dict(
        activation=identity,
        activation_derivative=identity_deriv,
        error=squared,
        error_derivative=squared_deriv,
        learning_rate=0.1,
    )
    a = Network.from_dims([3, 4, 2], seed=5, scale=0.25, **kwargs)
    b = Network.from_dims([3, 4, 2], seed=5, scale=0.25, **kwargs)
    assert a.layer_sizes == [3, 4, 2]
    assert a.weights() == b.weights()
    assert all(abs(w) <= 0.25 for n in a.layers[1] for w in n.weights)
