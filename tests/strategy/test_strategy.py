import numpy as np
import pytest

from mlrsynth.analysis.mec import ECComputer
from mlrsynth.data.constraint import Semantics
from mlrsynth.data.distribution import Distribution
from mlrsynth.exceptions.invalid_strategy_state_error import InvalidStrategyStateError
from mlrsynth.multilongrun.indexer import VariableIndexBuilder
from mlrsynth.multilongrun.multilongrun import MultiLongRun
from mlrsynth.multilongrun.views import MDPView
from mlrsynth.strategy.epsilon_approximation import EpsilonApproximationXiNStrategy
from mlrsynth.strategy.multilongrun_strategy import MultiLongRunStrategy, TRANSIENT
from mlrsynth.strategy.xin_strategy import XiNStrategy

from helpers.helper import regression_mdp, regression_query

EPSILON = 1e-6


@pytest.fixture(scope="module")
def regression_strategy():
    constraints, objectives = regression_query()
    mlr = MultiLongRun(regression_mdp(), constraints, objectives, semantics=Semantics.CONJUNCTIVE)
    mlr.solve_default()
    return mlr.get_strategy(rng=np.random.default_rng(42))


def test_transient_distributions_sum_to_one(regression_strategy):
    for state in range(4):
        distribution = regression_strategy.get_transient(state)
        if distribution is not None:
            assert distribution.sum() == pytest.approx(1.0, abs=EPSILON)


def test_switching_distributions(regression_strategy):
    assert regression_strategy.get_switching(0) is None
    assert regression_strategy.get_switching(1).is_close(Distribution({1: 1.0}), EPSILON)
    assert regression_strategy.get_switching(2).is_close(Distribution({2: 0.25, 3: 0.75}), EPSILON)
    # the end component {3} is never used
    assert regression_strategy.get_switching(3) is None
    for state in (1, 2):
        assert regression_strategy.get_switching(state).sum() == pytest.approx(1.0, abs=EPSILON)


def test_recurrent_distributions(regression_strategy):
    assert regression_strategy.num_recurrent() == 4
    assert regression_strategy.num_strategies() == 5
    both = regression_strategy.get_recurrent(3).get_next_move(2)
    assert both.get(0) == pytest.approx(0.5, abs=EPSILON)
    assert both.get(1) == pytest.approx(0.5, abs=EPSILON)
    assert both.get(2) == 0.0
    second = regression_strategy.get_recurrent(2).get_next_move(2)
    assert second.get(1) == pytest.approx(1.0, abs=EPSILON)
    for k in range(4):
        recurrent = regression_strategy.get_recurrent(k)
        assert not recurrent.is_defined(0)
        for state in (1, 2, 3):
            move = recurrent.get_next_move(state)
            assert move.sum() == pytest.approx(1.0)
            assert all(p > 0.0 for _, p in move.items())


def test_memory_updates(regression_strategy):
    strategy = regression_strategy
    strategy.init(0)
    assert strategy.current_memory() == TRANSIENT
    assert strategy.get_memory_size() == 2
    assert strategy.get_next_move(0).sum() == pytest.approx(1.0)
    for _ in range(200):
        strategy.init(0)
        strategy.update_memory(1, 2)
        memory = strategy.current_memory()
        assert memory in (2, 3)
        # memory does not change once recurrent
        strategy.update_memory(0, 2)
        assert strategy.current_memory() == memory
        assert strategy.get_next_move(2).sum() == pytest.approx(1.0)
    strategy.init(0)
    strategy.update_memory(0, 1)
    assert strategy.current_memory() == 1


def test_seeded_runs_are_reproducible():
    constraints, objectives = regression_query()
    mlr = MultiLongRun(regression_mdp(), constraints, objectives, semantics=Semantics.CONJUNCTIVE)
    mlr.solve_default()

    def run(seed):
        strategy = mlr.get_strategy(rng=np.random.default_rng(seed))
        memories = []
        for _ in range(50):
            strategy.init(0)
            strategy.update_memory(1, 2)
            memories.append(strategy.current_memory())
        return memories

    assert run(7) == run(7)
    assert set(run(7)) == {2, 3}


def test_invalid_state_keeps_memory(regression_strategy):
    strategy = regression_strategy
    strategy.init(0)
    strategy.update_memory(0, 1)
    assert strategy.current_memory() == 1
    with pytest.raises(InvalidStrategyStateError):
        strategy.get_next_move(0)
    assert strategy.current_memory() == 1
    with pytest.raises(InvalidStrategyStateError):
        strategy.get_next_move(17)
    strategy.reset()
    assert strategy.is_transient()


def test_set_memory(regression_strategy):
    strategy = regression_strategy
    strategy.set_memory(3)
    assert strategy.current_memory() == 3
    strategy.set_memory(TRANSIENT)
    assert strategy.is_transient()
    with pytest.raises(ValueError):
        strategy.set_memory(4)
    with pytest.raises(ValueError):
        strategy.set_memory(-2)


def test_distribution_of_strategy(regression_strategy):
    strategy = regression_strategy
    assert strategy.get_distribution_of_strategy(0, 0) == strategy.get_transient(0)
    assert strategy.get_distribution_of_strategy(0, 2) is None
    assert strategy.get_distribution_of_strategy(2, 4) == strategy.get_recurrent(3).get_next_move(2)
    assert "switching" in strategy.description()


def test_undefined_transient_move():
    strategy = MultiLongRunStrategy([None], [None], [], rng=np.random.default_rng(0))
    strategy.init(0)
    with pytest.raises(InvalidStrategyStateError) as excinfo:
        strategy.get_next_move(0)
    assert excinfo.value.memory == TRANSIENT


def xin_for_pattern(values_by_column, pattern, bits=1):
    view = MDPView(regression_mdp())
    mecs = ECComputer(view).compute_mecs()
    index = VariableIndexBuilder(view, mecs, bits).build()
    values = np.zeros(index.num_variables())
    for (state, action, n), value in values_by_column.items():
        values[index.var_x(state, action, n)] = value
    return XiNStrategy(view, index, values, pattern, mecs, phase_scale=1000)


def test_xin_perturbation_decreases_with_phase():
    xin = xin_for_pattern({(2, 0, 1): 0.8, (2, 1, 1): 0.2}, 1)
    first = xin.get_next_move(2)
    # perturbation 3 / 1000 per staying action, the leaving action is ignored
    assert first.get(0) == pytest.approx((0.8 + 0.003) / (1.0 + 0.006))
    assert first.get(2) == 0.0
    assert not xin.is_epsilon_approximation(EPSILON)
    approximation = xin.compute_approximation(EPSILON)
    assert xin.phase > 0
    assert xin.is_epsilon_approximation(EPSILON)
    assert approximation.get_next_move(2).get(0) == pytest.approx(0.8, abs=1e-5)
    with pytest.raises(InvalidStrategyStateError):
        xin.get_next_move(0)


def test_xin_phases_advance_with_steps():
    xin = xin_for_pattern({(1, 0, 1): 1.0}, 1)
    xin.init(1)
    for _ in range(1001):
        xin.update_memory(0, 1)
    assert xin.phase == 1
    xin.reset()
    assert xin.phase == 0
    assert xin.get_memory_size() == 0


def test_epsilon_approximation_equality():
    first = EpsilonApproximationXiNStrategy([None, Distribution({0: 1.0})], 1e-6)
    second = EpsilonApproximationXiNStrategy([None, Distribution({0: 1.0})], 1e-3)
    assert first == second
    assert first != EpsilonApproximationXiNStrategy([Distribution({0: 1.0}), None], 1e-6)
    assert first.get_memory_size() == 0
    with pytest.raises(InvalidStrategyStateError):
        first.get_next_move(0)
