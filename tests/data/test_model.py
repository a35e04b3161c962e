import pytest

from mlrsynth.data.model import MDP
from mlrsynth.data.model_type import ModelType, model_is_nondeterministic
from mlrsynth.data.rewards import Rewards

from helpers.helper import regression_mdp


def test_mdp_accessors():
    mdp = regression_mdp()
    assert mdp.num_states() == 4
    assert mdp.initial_state() == 0
    assert mdp.num_choices(0) == 2
    assert mdp.num_choices(2) == 3
    assert dict(mdp.transitions(0, 0)) == {1: 0.6, 2: 0.4}
    assert set(mdp.successors(2, 2)) == {3}
    assert mdp.num_transitions() == 8
    assert mdp.all_successors_in_set(2, 0, {2})
    assert not mdp.all_successors_in_set(2, 2, {2})
    assert mdp.model_type() == ModelType.MDP
    assert model_is_nondeterministic(mdp.model_type())
    assert not model_is_nondeterministic(ModelType.DTMC)


def test_mdp_rejects_invalid_distributions():
    with pytest.raises(ValueError):
        MDP(1, [[{0: 0.5}]])
    with pytest.raises(ValueError):
        MDP(2, [[{0: 1.2, 1: -0.2}], [{1: 1.0}]])
    with pytest.raises(ValueError):
        MDP(1, [[]])
    with pytest.raises(ValueError):
        MDP(1, [[{3: 1.0}]])
    with pytest.raises(ValueError):
        MDP(1, [[{0: 1.0}]], initial_state=1)


def test_mdp_drops_zero_probabilities():
    mdp = MDP(2, [[{0: 0.0, 1: 1.0}], [{1: 1.0}]])
    assert dict(mdp.transitions(0, 0)) == {1: 1.0}


def test_rewards():
    rewards = Rewards({1: 2.0}, {(1, 0): 0.5}, name="cost")
    assert rewards.state_reward(1) == 2.0
    assert rewards.state_reward(0) == 0.0
    assert rewards.transition_reward(1, 0) == 0.5
    assert rewards.transition_reward(1, 1) == 0.0
    assert rewards.reward(1, 0) == 2.5
    assert rewards.has_state_rewards()
    assert str(rewards) == "R{cost}"
    assert not Rewards().has_transition_rewards()
