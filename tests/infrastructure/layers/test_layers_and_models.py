import unittest

import numpy as np

from graphgrad.domain import IModule, ShapeError, ShapeMismatchError
from graphgrad.infrastructure._activations import ReLU, Sigmoid
from graphgrad.infrastructure._linear import Linear
from graphgrad.infrastructure._models import MLP2, Sequential
from graphgrad.infrastructure._runtime import make_rng
from graphgrad.infrastructure.array import Array
from graphgrad.infrastructure.autograd import Graph


def arr_from_np(a) -> Array:
    return Array(np.asarray(a, dtype=np.float32))


class TestLinear(unittest.TestCase):
    def test_parameter_shapes_and_names(self):
        layer = Linear(3, 2, name="fc")
        names = [n for n, _ in layer.named_parameters()]
        self.assertEqual(names, ["weight", "bias"])
        self.assertEqual(layer.weight.name, "fc.weight")
        self.assertEqual(layer.weight.shape, (3, 2))
        self.assertEqual(layer.bias.shape, (2,))
        self.assertIsInstance(layer, IModule)

    def test_starts_at_zero_until_initialized(self):
        layer = Linear(4, 3)
        self.assertTrue(np.all(layer.weight.data.to_numpy() == 0.0))
        layer.init_xavier(make_rng(0))
        w = layer.weight.data.to_numpy()
        bound = np.sqrt(6.0 / (4 + 3))
        self.assertTrue(np.any(w != 0.0))
        self.assertTrue(np.all(np.abs(w) <= bound))
        self.assertTrue(np.all(layer.bias.data.to_numpy() == 0.0))

    def test_init_is_reproducible(self):
        a = Linear(5, 5).init_xavier(make_rng(7))
        b = Linear(5, 5).init_xavier(make_rng(7))
        np.testing.assert_array_equal(a.weight.data.to_numpy(), b.weight.data.to_numpy())

    def test_forward_matches_numpy(self):
        layer = Linear(3, 2).init_xavier(make_rng(1))
        layer.bias.data = arr_from_np([0.5, -0.5])
        x = np.arange(6, dtype=np.float32).reshape(2, 3)
        out = layer(arr_from_np(x))
        expected = x @ layer.weight.data.to_numpy() + np.array([0.5, -0.5], dtype=np.float32)
        np.testing.assert_allclose(out.to_numpy(), expected, rtol=1e-5, atol=1e-6)

    def test_forward_graph_matches_forward(self):
        layer = Linear(3, 2).init_xavier(make_rng(2))
        x = arr_from_np(np.ones((4, 3)))
        g = Graph()
        out_id, param_ids = layer.forward_graph(g, g.var(x))
        self.assertEqual(len(param_ids), 2)
        np.testing.assert_allclose(g.data(out_id).to_numpy(), layer(x).to_numpy(), rtol=1e-6)
        self.assertIs(g.data(param_ids[0]), layer.weight.data)

    def test_rejects_wrong_input_width(self):
        with self.assertRaises(ShapeMismatchError):
            Linear(3, 2)(arr_from_np(np.ones((1, 4))))

    def test_invalid_sizes(self):
        with self.assertRaises(ValueError):
            Linear(0, 2)


class TestActivationModules(unittest.TestCase):
    def test_relu_sigmoid_have_no_parameters(self):
        self.assertEqual(ReLU().parameters(), [])
        self.assertEqual(Sigmoid().parameters(), [])

    def test_forward_graph_matches_forward(self):
        x = arr_from_np([[-1.0, 0.5]])
        for m in (ReLU(), Sigmoid()):
            g = Graph()
            out_id, ids = m.forward_graph(g, g.var(x))
            self.assertEqual(ids, [])
            np.testing.assert_allclose(g.data(out_id).to_numpy(), m(x).to_numpy())


class TestMLP2(unittest.TestCase):
    def test_parameter_order(self):
        model = MLP2(2, 4, 3)
        names = [n for n, _ in model.named_parameters()]
        self.assertEqual(
            names,
            ["linear1.weight", "linear1.bias", "linear2.weight", "linear2.bias"],
        )

    def test_forward_graph_param_ids_follow_parameters(self):
        model = MLP2(2, 4, 3).init_xavier(make_rng(0))
        g = Graph()
        x = arr_from_np([[0.1, -0.2], [0.3, 0.4]])
        out_id, param_ids = model.forward_graph(g, g.var(x))
        self.assertEqual(g.data(out_id).shape, (2, 3))
        for p, nid in zip(model.parameters(), param_ids):
            self.assertIs(g.data(nid), p.data)
        np.testing.assert_allclose(g.data(out_id).to_numpy(), model(x).to_numpy(), rtol=1e-6)

    def test_repr_lists_children(self):
        text = repr(MLP2(2, 4, 3))
        self.assertIn("(linear1): Linear(in_features=2, out_features=4)", text)
        self.assertIn("(act): ReLU()", text)


class TestSequential(unittest.TestCase):
    def test_equivalent_to_mlp2(self):
        rng = make_rng(5)
        seq = Sequential(Linear(2, 3).init_xavier(rng), ReLU(), Linear(3, 1).init_xavier(rng))
        self.assertEqual(len(seq), 3)
        self.assertEqual(len(seq.parameters()), 4)

        x = arr_from_np([[1.0, -1.0]])
        g = Graph()
        out_id, ids = seq.forward_graph(g, g.var(x))
        self.assertEqual(len(ids), 4)
        np.testing.assert_allclose(g.data(out_id).to_numpy(), seq(x).to_numpy(), rtol=1e-6)

    def test_add_validates(self):
        seq = Sequential()
        with self.assertRaises(TypeError):
            seq.add("not a module")
        seq.add(ReLU(), name="act")
        with self.assertRaises(ValueError):
            seq.add(ReLU(), name="act")


class TestModuleStateDict(unittest.TestCase):
    def test_state_dict_uses_qualified_names(self):
        model = MLP2(2, 3, 1)
        names = [s.name for s in model.state_dict()]
        self.assertEqual(names[0], "linear1.weight")
        self.assertEqual(len(names), 4)

    def test_load_state_dict_restores_values(self):
        src = MLP2(2, 3, 1).init_xavier(make_rng(0))
        dst = MLP2(2, 3, 1)
        self.assertIs(dst.load_state_dict(src.state_dict()), dst)
        for a, b in zip(src.parameters(), dst.parameters()):
            np.testing.assert_array_equal(a.data.to_numpy(), b.data.to_numpy())

    def test_load_state_dict_count_mismatch(self):
        with self.assertRaises(ValueError):
            MLP2(2, 3, 1).load_state_dict(Linear(2, 3).state_dict())

    def test_load_state_dict_shape_mismatch_leaves_module_untouched(self):
        dst = MLP2(2, 3, 1)
        states = MLP2(2, 3, 1).init_xavier(make_rng(1)).state_dict()
        bad = MLP2(2, 3, 2).state_dict()
        states[-1] = bad[-1]
        with self.assertRaises(ShapeError):
            dst.load_state_dict(states)
        self.assertTrue(np.all(dst.linear1.weight.data.to_numpy() == 0.0))

    def test_name_mismatch_warns(self):
        src = Linear(2, 2).init_xavier(make_rng(0))
        states = src.state_dict()
        states[0].name = "other.weight"
        with self.assertWarns(RuntimeWarning):
            Linear(2, 2).load_state_dict(states)


if __name__ == "__main__":
    unittest.main()
