from mlrsynth.exceptions.invalid_strategy_state_error import InvalidStrategyStateError
from mlrsynth.strategy.strategy import Strategy


class EpsilonApproximationXiNStrategy(Strategy):
    """
    Memoryless snapshot of a phase-indexed recurrent policy.
    """

    def __init__(self, choices, epsilon):
        """
        :param choices: List with one Distribution per state, None where no move is defined.
        :param epsilon: Precision the snapshot was taken with.
        """
        self._choices = list(choices)
        self.epsilon = epsilon

    def init(self, state):
        pass

    def update_memory(self, action, state):
        pass

    def reset(self):
        pass

    def get_memory_size(self):
        return 0

    def is_defined(self, state):
        return 0 <= state < len(self._choices) and self._choices[state] is not None

    def get_next_move(self, state):
        if not self.is_defined(state):
            raise InvalidStrategyStateError("No recurrent move defined in state {}".format(state), state)
        return self._choices[state]

    def description(self):
        lines = ["Epsilon approximation ({}) of a recurrent strategy".format(self.epsilon)]
        lines += ["{}: {}".format(s, d) for s, d in enumerate(self._choices) if d is not None]
        return "\n".join(lines)

    def __eq__(self, other):
        return isinstance(other, EpsilonApproximationXiNStrategy) and self._choices == other._choices

    def __hash__(self):
        return hash(tuple(self._choices))

    def __str__(self):
        return self.description()
