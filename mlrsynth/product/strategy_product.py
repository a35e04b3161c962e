import logging
from collections import defaultdict

from mlrsynth.data.distribution import Distribution
from mlrsynth.data.model_type import ModelType

logger = logging.getLogger(__name__)


class StrategyProduct:
    """
    Markov chain induced by a MultiLongRunStrategy on an MDP, built on demand.
    The compound state of MDP state s and memory m is s * (K + 1) + m, where m = 0 is the transient
    phase and m = k + 1 the recurrent strategy k.
    """

    def __init__(self, mdp, strategy):
        """
        Constructor.
        :param mdp: MDP or MDPView the strategy was computed for.
        :param strategy: MultiLongRunStrategy.
        """
        self._mdp = mdp
        self._strategy = strategy
        self._width = strategy.num_strategies()
        self._cache = dict()

    @property
    def strategy(self):
        return self._strategy

    def num_strategies(self):
        return self._width

    def num_states(self):
        return self._mdp.num_states() * self._width

    def compound_state(self, state, memory):
        return state * self._width + memory

    def project_state(self, state):
        return state // self._width

    def memory_of(self, state):
        return state % self._width

    def model_type(self):
        return ModelType.DTMC

    def initial_state(self):
        """
        Transient compound state of the MDP's initial state.
        If the strategy switches right away, the chain starts according to initial_distribution().
        """
        return self.compound_state(self._mdp.initial_state(), 0)

    def _switch_at(self, state, weight, result):
        switching = self._strategy.get_switching(state)
        if switching is None:
            result[self.compound_state(state, 0)] += weight
            return
        for k, p in switching.items():
            if weight * p > 0.0:
                result[self.compound_state(state, k + 1)] += weight * p

    def initial_distribution(self):
        result = defaultdict(float)
        self._switch_at(self._mdp.initial_state(), 1.0, result)
        return Distribution(result)

    def action_distribution(self, state):
        """
        Action distribution the strategy uses in a compound state, None if undefined.
        """
        return self._strategy.get_distribution_of_strategy(self.project_state(state), self.memory_of(state))

    def transitions(self, state):
        """
        Successor distribution of a compound state.
        :return: Distribution over compound states, empty if the strategy is undefined there.
        """
        if state in self._cache:
            return self._cache[state]
        mdp_state = self.project_state(state)
        memory = self.memory_of(state)
        actions = self.action_distribution(state)
        result = defaultdict(float)
        if actions is not None:
            for action, action_prob in actions.items():
                for succ, prob in self._mdp.transitions(mdp_state, action):
                    weight = action_prob * prob
                    if weight <= 0.0:
                        continue
                    if memory == 0:
                        self._switch_at(succ, weight, result)
                    else:
                        result[self.compound_state(succ, memory)] += weight
        distribution = Distribution(result)
        self._cache[state] = distribution
        return distribution

    def successors(self, state):
        return self.transitions(state).support()

    def is_successor(self, state, succ):
        return succ in self.transitions(state)

    def num_transitions(self, state=None):
        if state is not None:
            return len(self.transitions(state))
        return sum(len(self.transitions(s)) for s in self.reachable_states())

    def reachable_states(self):
        """
        Compound states reachable from the initial distribution, in discovery order.
        """
        initial = sorted(self.initial_distribution().support())
        visited = set(initial)
        stack = list(reversed(initial))
        order = []
        while stack:
            state = stack.pop()
            order.append(state)
            for succ in sorted(self.successors(state), reverse=True):
                if succ not in visited:
                    visited.add(succ)
                    stack.append(succ)
        return order
