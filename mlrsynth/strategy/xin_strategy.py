import logging

from mlrsynth.config import configuration
from mlrsynth.data.distribution import Distribution
from mlrsynth.exceptions.invalid_strategy_state_error import InvalidStrategyStateError
from mlrsynth.strategy.epsilon_approximation import EpsilonApproximationXiNStrategy
from mlrsynth.strategy.strategy import Strategy

logger = logging.getLogger(__name__)


class XiNStrategy(Strategy):
    """
    Recurrent policy for bit-pattern N, built from the long-run frequencies x(s,a,N).

    Every action staying in the end component gets the frequency x(s,a,N) plus a perturbation
    choices(s) / M, where M = (phase + 1) * phase_scale. The perturbation keeps all staying actions
    positive, so the induced chain on the end component is irreducible. With growing phase the
    policy approaches the optimal frequencies.
    """

    def __init__(self, model, index, values, pattern, mecs, phase_scale=None):
        """
        Constructor.
        :param model: ModelView.
        :param index: VariableIndex.
        :param values: Solution vector of the linear program.
        :param pattern: The bit-pattern N.
        :param mecs: Maximal end components.
        :param phase_scale: Factor of M, read from the configuration if None.
        """
        self._model = model
        self.pattern = pattern
        self._phase_scale = phase_scale if phase_scale is not None else configuration.get_phase_scale()
        self.phase = 0
        self._steps_until_next_phase = self._phase_length(0)
        # frequencies of the actions staying in the end component, per end component state
        self._frequencies = dict()
        for mec in mecs:
            for state in mec:
                staying = dict()
                for action in range(model.num_choices(state)):
                    if all(succ in mec for succ, prob in model.transitions(state, action) if prob > 0):
                        staying[action] = max(0.0, float(values[index.var_x(state, action, pattern)]))
                self._frequencies[state] = staying

    def _phase_length(self, phase):
        return (phase + 1) * self._phase_scale

    def _m(self):
        return (self.phase + 1) * float(self._phase_scale)

    def _perturbation(self, state):
        return self._model.num_choices(state) / self._m()

    def is_mec_state(self, state):
        return state in self._frequencies

    def init(self, state):
        self.reset()

    def update_memory(self, action, state):
        if self._steps_until_next_phase == 0:
            self.phase += 1
            self._steps_until_next_phase = self._phase_length(self.phase)
        else:
            self._steps_until_next_phase -= 1

    def reset(self):
        self.phase = 0
        self._steps_until_next_phase = self._phase_length(0)

    def get_memory_size(self):
        # the phase counter is not part of the exported snapshot
        return 0

    def get_next_move(self, state):
        if not self.is_mec_state(state):
            raise InvalidStrategyStateError(
                "A recurrent strategy is only defined in end component states, not in {}".format(state), state)
        perturbation = self._perturbation(state)
        staying = self._frequencies[state]
        denominator = sum(staying.values()) + perturbation * len(staying)
        return Distribution({action: (x + perturbation) / denominator for action, x in staying.items()})

    def is_epsilon_approximation(self, epsilon):
        """
        Check whether the perturbation mass is small enough compared to the frequencies at the current phase.
        """
        sum_x = 0.0
        sum_perturbation = 0.0
        for state, staying in self._frequencies.items():
            sum_x += sum(staying.values())
            sum_perturbation += self._perturbation(state) * len(staying)
        # numerical epsilon matters if sum_x is zero
        return sum_perturbation * (1.0 - epsilon) <= sum_x * epsilon + configuration.get_numerical_epsilon()

    def set_phase_for_epsilon(self, epsilon):
        while not self.is_epsilon_approximation(epsilon):
            self.phase = (self.phase + 1) * 10
        logger.debug("Pattern %s reaches precision %s in phase %s", self.pattern, epsilon, self.phase)

    def compute_approximation(self, epsilon=None):
        """
        Advance the phase until the policy is an epsilon approximation and freeze it.
        :param epsilon: Precision, read from the configuration if None.
        :return: EpsilonApproximationXiNStrategy.
        """
        if epsilon is None:
            epsilon = configuration.get_approximation_epsilon()
        self.set_phase_for_epsilon(epsilon)
        choices = [self.get_next_move(state) if self.is_mec_state(state) else None
                   for state in range(self._model.num_states())]
        return EpsilonApproximationXiNStrategy(choices, epsilon)

    def __str__(self):
        return str(self.compute_approximation())
