import numpy as np
import pytest

from mlrsynth.data.constraint import Constraint, Operator, Semantics
from mlrsynth.data.distribution import Distribution
from mlrsynth.data.model_type import ModelType
from mlrsynth.multilongrun.multilongrun import MultiLongRun, verify_product
from mlrsynth.multilongrun.views import ProductView
from mlrsynth.product.strategy_product import StrategyProduct
from mlrsynth.strategy.multilongrun_strategy import MultiLongRunStrategy
from mlrsynth.strategy.epsilon_approximation import EpsilonApproximationXiNStrategy

from helpers.helper import regression_mdp, regression_query, regression_rewards


@pytest.fixture(scope="module")
def regression_product():
    mdp = regression_mdp()
    constraints, objectives = regression_query()
    mlr = MultiLongRun(mdp, constraints, objectives, semantics=Semantics.CONJUNCTIVE)
    mlr.solve_default()
    return StrategyProduct(mdp, mlr.get_strategy(rng=np.random.default_rng(0)))


def test_compound_states(regression_product):
    product = regression_product
    assert product.num_strategies() == 5
    assert product.num_states() == 20
    assert product.compound_state(2, 3) == 13
    assert product.project_state(13) == 2
    assert product.memory_of(13) == 3
    assert product.initial_state() == 0
    assert product.initial_distribution() == Distribution({0: 1.0})
    assert product.model_type() == ModelType.DTMC


def test_initial_successors(regression_product):
    product = regression_product
    transitions = product.transitions(0)
    assert transitions.support() == {7, 13, 14}
    assert transitions.get(7) == pytest.approx(0.2, abs=1e-6)
    assert transitions.get(13) == pytest.approx(0.2, abs=1e-6)
    assert transitions.get(14) == pytest.approx(0.6, abs=1e-6)
    assert all(p > 0.0 for _, p in transitions.items())
    assert transitions.sum() == pytest.approx(1.0)
    assert product.is_successor(0, 7)
    assert not product.is_successor(0, 5)


def test_convolution_matches_strategy(regression_product):
    product = regression_product
    mdp = regression_mdp()
    strategy = product.strategy
    expected = dict()
    for action, action_prob in strategy.get_transient(0).items():
        for succ, prob in mdp.transitions(0, action):
            switching = strategy.get_switching(succ)
            for k, switch_prob in switching.items():
                target = product.compound_state(succ, k + 1)
                expected[target] = expected.get(target, 0.0) + action_prob * prob * switch_prob
    assert product.transitions(0).is_close(Distribution(expected))


def test_recurrent_successors_keep_memory(regression_product):
    product = regression_product
    assert product.transitions(7) == Distribution({7: 1.0})
    assert product.successors(14) == {14}
    # undefined compound states have no successors
    assert product.successors(product.compound_state(0, 2)) == set()


def test_reachable_states(regression_product):
    product = regression_product
    assert sorted(product.reachable_states()) == [0, 7, 13, 14]
    assert product.num_transitions() == 6
    assert product.num_transitions(0) == 3


def test_transient_without_switching():
    mdp = regression_mdp()
    # switching only defined in state 1, state 2 stays transient
    transient = [Distribution({1: 1.0}), None, Distribution({0: 1.0}), None]
    switching = [None, Distribution({0: 1.0}), None, None]
    recurrent = [EpsilonApproximationXiNStrategy([None, Distribution({0: 1.0}), None, None], 1e-6)]
    product = StrategyProduct(mdp, MultiLongRunStrategy(transient, switching, recurrent))
    assert product.transitions(0) == Distribution({4: 1.0})
    assert product.transitions(4) == Distribution({4: 1.0})


def test_product_view(regression_product):
    view = ProductView(regression_product)
    r1, r2, _ = regression_rewards()
    assert view.num_choices(0) == 1
    assert view.num_choices(regression_product.compound_state(0, 1)) == 0
    assert view.reward_state(14) == 2
    assert view.reward(r1, 14, 0) == pytest.approx(0.5, abs=1e-5)
    assert view.reward(r2, 14, 0) == pytest.approx(0.5, abs=1e-5)
    assert view.reward(r1, 7, 0) == pytest.approx(1.0)
    assert view.model_type() == ModelType.DTMC


def test_verify_product(regression_product):
    r1, r2, _ = regression_rewards()
    relaxed = [Constraint(r1, Operator.R_GE, 0.49, 0.79), Constraint(r2, Operator.R_GE, 0.49, 0.79)]
    assert verify_product(regression_product, relaxed, semantics=Semantics.CONJUNCTIVE).value is True
    too_strong = [Constraint(r1, Operator.R_GE, 0.49, 0.9)]
    assert verify_product(regression_product, too_strong, semantics=Semantics.CONJUNCTIVE).value is False


def test_verify_product_objective(regression_product):
    r1, r2, r3 = regression_rewards()
    from mlrsynth.data.constraint import Objective
    relaxed = [Constraint(r1, Operator.R_GE, 0.49, 0.79), Constraint(r2, Operator.R_GE, 0.49, 0.79)]
    result = verify_product(regression_product, relaxed, [Objective(r3)], semantics=Semantics.CONJUNCTIVE)
    assert result.value == pytest.approx(0.45, abs=1e-4)


def test_no_strategy_for_product_chain(regression_product):
    r1, _, _ = regression_rewards()
    mlr = MultiLongRun(ProductView(regression_product), [Constraint(r1, Operator.R_GE, 0.0)], [])
    assert mlr.get_strategy() is None
