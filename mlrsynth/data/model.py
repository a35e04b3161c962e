import logging
import math

from mlrsynth.data.model_type import ModelType

logger = logging.getLogger(__name__)

PROBABILITY_TOLERANCE = 1e-9


class MDP:
    """
    Explicit Markov decision process.
    choices[s][a] maps each successor of action a in state s to its probability.
    """

    def __init__(self, num_states, choices, initial_state=0):
        """
        Constructor.
        :param num_states: Number of states.
        :param choices: List with one entry per state, each a list of successor distributions.
        :param initial_state: The initial state.
        """
        if len(choices) != num_states:
            raise ValueError("Expected choices for {} states, got {}".format(num_states, len(choices)))
        if not 0 <= initial_state < num_states:
            raise ValueError("Initial state {} out of range".format(initial_state))
        self._num_states = num_states
        self._initial_state = initial_state
        self._choices = []
        for state, state_choices in enumerate(choices):
            if len(state_choices) == 0:
                raise ValueError("State {} has no choices".format(state))
            self._choices.append([self._check_distribution(state, action, dict(distr))
                                  for action, distr in enumerate(state_choices)])
        logger.debug("Built MDP with %s states and %s transitions", num_states, self.num_transitions())

    def _check_distribution(self, state, action, distribution):
        for succ, prob in distribution.items():
            if not 0 <= succ < self._num_states:
                raise ValueError("Successor {} of ({}, {}) out of range".format(succ, state, action))
            if prob < 0:
                raise ValueError("Negative probability {} for ({}, {}) -> {}".format(prob, state, action, succ))
        total = math.fsum(distribution.values())
        if abs(total - 1.0) > PROBABILITY_TOLERANCE:
            raise ValueError("Probabilities of ({}, {}) sum to {}".format(state, action, total))
        return {succ: prob for succ, prob in distribution.items() if prob > 0}

    def num_states(self):
        return self._num_states

    def num_choices(self, state):
        return len(self._choices[state])

    def transitions(self, state, action):
        """
        :return: Iterable over (successor, probability).
        """
        return self._choices[state][action].items()

    def successors(self, state, action):
        return self._choices[state][action].keys()

    def all_successors_in_set(self, state, action, states):
        return all(succ in states for succ in self._choices[state][action])

    def initial_state(self):
        return self._initial_state

    def num_transitions(self):
        return sum(len(distr) for state_choices in self._choices for distr in state_choices)

    def model_type(self):
        return ModelType.MDP
