import os

from mlrsynth.data.constraint import Constraint, Objective, Operator
from mlrsynth.data.model import MDP
from mlrsynth.data.rewards import Rewards

EXAMPLE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.realpath(__file__))), "examples")


def get_example_path(benchmark, file):
    return os.path.join(EXAMPLE_DIR, benchmark, file)


def regression_mdp():
    """
    Four states; state 0 chooses between reaching state 1 (p=0.6) or state 2, and state 2 directly.
    States 1, 2 and 3 are end components; state 2 can move to state 3.
    """
    return MDP(4, [
        [{1: 0.6, 2: 0.4}, {2: 1.0}],
        [{1: 1.0}],
        [{2: 1.0}, {2: 1.0}, {3: 1.0}],
        [{3: 1.0}],
    ])


def regression_rewards():
    r1 = Rewards(transition_rewards={(1, 0): 1.0, (2, 0): 1.0}, name="r1")
    r2 = Rewards(transition_rewards={(2, 1): 1.0}, name="r2")
    r3 = Rewards(transition_rewards={(1, 0): 1.0, (2, 1): 0.5}, name="r3")
    return r1, r2, r3


def regression_query(probability=0.8, bound=0.5):
    """
    Two probabilistic constraints P>=0.8[lr(r1) >= 0.5], P>=0.8[lr(r2) >= 0.5] and the objective max lr(r3).
    """
    r1, r2, r3 = regression_rewards()
    constraints = [Constraint(r1, Operator.R_GE, bound, probability),
                   Constraint(r2, Operator.R_GE, bound, probability)]
    objectives = [Objective(r3, Operator.R_MAX)]
    return constraints, objectives


def two_state_mdp():
    """
    State 0 moves to state 1, where two self-loops are available.
    """
    return MDP(2, [
        [{1: 1.0}],
        [{1: 1.0}, {1: 1.0}],
    ])


def leaving_mdp():
    """
    State 0 moves to state 1; in state 1 one may stay or move to the absorbing state 2.
    """
    return MDP(3, [
        [{1: 1.0}],
        [{1: 1.0}, {2: 1.0}],
        [{2: 1.0}],
    ])


def cycle_mdp():
    """
    States 0 and 1 form an end component, state 2 is a trap reachable from state 1,
    state 3 is transient and leads to both.
    """
    return MDP(4, [
        [{1: 1.0}],
        [{0: 1.0}, {2: 1.0}],
        [{2: 1.0}],
        [{0: 0.5, 2: 0.5}],
    ], initial_state=3)
