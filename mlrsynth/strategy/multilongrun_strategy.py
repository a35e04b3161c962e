import logging

import numpy as np

from mlrsynth.exceptions.invalid_strategy_state_error import InvalidStrategyStateError
from mlrsynth.strategy.strategy import Strategy

logger = logging.getLogger(__name__)

TRANSIENT = -1


class MultiLongRunStrategy(Strategy):
    """
    Controller with a transient and a recurrent phase.
    In the transient phase, moves are taken from the transient distributions. When a state with a switching
    distribution is reached, a recurrent strategy k is drawn from it and used from then on.
    """

    def __init__(self, transient, switching, recurrent, rng=None):
        """
        Constructor.
        :param transient: List with one action Distribution per state, None where undefined.
        :param switching: List with one bit-pattern Distribution per state, None outside end components.
        :param recurrent: List of recurrent strategies, one per bit-pattern.
        :param rng: numpy random Generator used to draw the recurrent strategy.
        """
        assert len(transient) == len(switching)
        self._transient = list(transient)
        self._switching = list(switching)
        self._recurrent = list(recurrent)
        self._rng = rng if rng is not None else np.random.default_rng()
        self._memory = TRANSIENT

    def num_states(self):
        return len(self._transient)

    def num_recurrent(self):
        return len(self._recurrent)

    def num_strategies(self):
        return len(self._recurrent) + 1

    def current_memory(self):
        return self._memory

    def is_transient(self):
        return self._memory == TRANSIENT

    def set_memory(self, memory):
        if not TRANSIENT <= memory < len(self._recurrent):
            raise ValueError("Memory {} out of range [{}, {})".format(memory, TRANSIENT, len(self._recurrent)))
        self._memory = memory

    def get_switching(self, state):
        """
        :param state: State of the MDP.
        :return: Distribution over recurrent strategies, None outside end components and also in end
            components the solution never reaches. The controller stays transient in both cases.
        """
        return self._switching[state]

    def get_transient(self, state):
        return self._transient[state]

    def get_recurrent(self, k):
        return self._recurrent[k]

    def _switch(self, state):
        switching = self._switching[state]
        if switching is None:
            return
        patterns = sorted(switching.support())
        probabilities = np.array([switching.get(k) for k in patterns])
        self._memory = int(self._rng.choice(patterns, p=probabilities / probabilities.sum()))
        logger.debug("Switched to recurrent strategy %s in state %s", self._memory, state)

    def init(self, state):
        self._memory = TRANSIENT
        self._switch(state)

    def update_memory(self, action, state):
        if self._memory == TRANSIENT:
            self._switch(state)

    def reset(self):
        self._memory = TRANSIENT

    def get_memory_size(self):
        return 2

    def get_distribution_of_strategy(self, state, index):
        """
        :param state: MDP state.
        :param index: 0 for the transient strategy, k + 1 for recurrent strategy k.
        :return: The action distribution or None if it is not defined.
        """
        if index == 0:
            return self._transient[state]
        recurrent = self._recurrent[index - 1]
        if not recurrent.is_defined(state):
            return None
        return recurrent.get_next_move(state)

    def get_next_move(self, state):
        if not 0 <= state < len(self._transient):
            raise InvalidStrategyStateError("Unknown state {}".format(state), state, self._memory)
        if self._memory == TRANSIENT:
            distribution = self._transient[state]
            if distribution is None:
                raise InvalidStrategyStateError(
                    "No transient move defined in state {}".format(state), state, self._memory)
            return distribution
        try:
            return self._recurrent[self._memory].get_next_move(state)
        except InvalidStrategyStateError as e:
            raise InvalidStrategyStateError(e.message, state, self._memory)

    def description(self):
        lines = ["Multi long-run strategy, current memory: {}".format(
            "transient" if self._memory == TRANSIENT else self._memory)]
        lines.append("transient:")
        lines += ["  {}: {}".format(s, d) for s, d in enumerate(self._transient) if d is not None]
        lines.append("switching:")
        lines += ["  {}: {}".format(s, d) for s, d in enumerate(self._switching) if d is not None]
        for k, recurrent in enumerate(self._recurrent):
            lines.append("recurrent {}:".format(k))
            lines += ["  {}: {}".format(s, recurrent.get_next_move(s))
                      for s in range(len(self._transient)) if recurrent.is_defined(s)]
        return "\n".join(lines)

    def __str__(self):
        return self.description()
