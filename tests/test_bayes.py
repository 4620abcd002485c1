import math
import pytest
from gazekeys.keyboard.layout import Layout, KeyDefinition
from gazekeys.keyboard.geometry import KeyGeometryCache, Rect
from gazekeys.bayes.keystate import new_states
from gazekeys.bayes.likelihood import LikelihoodModel
from gazekeys.bayes.prior import PriorModel
from gazekeys.bayes.posterior import EPS, compute_posterior

def two_keys(special_b=False):
    lay = Layout([[KeyDefinition(id="a", label="A"),
                   KeyDefinition(id="b", label="B", role="backspace" if special_b else "ordinary")]])
    geo = KeyGeometryCache()
    # sigma = 100 * 0.5 = 50, b centre is 150 px = 3 sigma away from a centre
    geo.update({"a": Rect(0, 0, 100, 100), "b": Rect(150, 0, 100, 100)})
    return lay, geo

def test_near_key_dominates_posterior():
    lay, geo = two_keys()
    lm = LikelihoodModel(lay, sigma_ratio=0.5)
    assert lm.update_sigma(geo) == 50.0
    lik = lm((50, 50), geo)
    assert lik["a"] == pytest.approx(1.0)
    assert lik["b"] == pytest.approx(math.exp(-4.5))
    states = new_states(lay.ids)
    post = compute_posterior(lik, lambda k: states[k].prior, states)
    assert post["a"] > 0.95
    assert post.best == "a" and post.second == "b"
    assert sum(post.probs.values()) == pytest.approx(1.0)
    assert states["a"].last_posterior == post["a"]

def test_special_boost_and_expansion():
    lay, geo = two_keys(special_b=True)
    lm = LikelihoodModel(lay, sigma_ratio=0.5, special_boost=0.75, active_expansion=1.5)
    lm.update_sigma(geo)
    assert lm((200, 50), geo)["b"] == pytest.approx(0.75)
    plain = lm((50, 50), geo)["b"]
    widened = lm((50, 50), geo, active_id="b")["b"]
    assert widened > plain

def test_missing_geometry_excluded():
    lay, geo = two_keys()
    geo.set("b", None)
    lm = LikelihoodModel(lay); lm.update_sigma(geo)
    assert list(lm((50, 50), geo)) == ["a"]
    geo.clear()
    assert lm((50, 50), geo) == {}
    assert lm.update_sigma(geo) == lm.default_sigma

def test_dirichlet_prior_update():
    lay = Layout([[KeyDefinition(id=f"k{i}", label=str(i)) for i in range(28)]])
    states = new_states(lay.ids)
    pm = PriorModel(lay, states, k=1.0)
    assert states["k0"].prior == pytest.approx(1/28)
    pm.record_selection("k0")
    assert states["k0"].selection_count == 1
    assert states["k0"].prior == pytest.approx(2/29)
    assert all(states[k].prior == pytest.approx(1/29) for k in lay.ids[1:])
    assert sum(s.prior for s in states.values()) == pytest.approx(1.0)
    before = states["k0"].prior
    pm.record_selection("k0")
    assert states["k0"].prior > before
    pm.reset()
    assert states["k0"].selection_count == 0 and states["k0"].prior == pytest.approx(1/28)

def test_special_prior_floor_does_not_mutate():
    lay, _ = two_keys(special_b=True)
    states = new_states(lay.ids)
    pm = PriorModel(lay, states, special_min=0.75)
    assert pm.effective("b") == 0.75
    assert pm.effective("a") == 0.5
    assert states["b"].prior == 0.5

def test_degenerate_sum_is_floored():
    post = compute_posterior({"a": 0.0, "b": 0.0}, lambda k: 0.5)
    assert post.total == EPS
    assert post.probs == {"a": 0.0, "b": 0.0}
    assert post.best is None
