import logging

from mlrsynth.data.constraint import Semantics
from mlrsynth.exceptions.dimension_not_supported_error import DimensionNotSupportedError

logger = logging.getLogger(__name__)

# column of a variable that does not exist
UNDEFINED = -1

MAX_BITS = 30


def compute_bits(num_probabilistic, semantics):
    """
    Number of bits of the bit-patterns N.
    :param num_probabilistic: Number of probabilistic constraints.
    :param semantics: Semantics.
    :return: Number of bits.
    """
    if semantics == Semantics.JOINT:
        bits = min(num_probabilistic, 1)
    else:
        bits = num_probabilistic
    if bits >= MAX_BITS:
        raise DimensionNotSupportedError(
            "{} probabilistic constraints need 2^{} bit-patterns".format(num_probabilistic, bits),
            0, MAX_BITS - 1, bits)
    return bits


class VariableIndex:
    """
    Maps the LP variables x(s,a,N), y(s,a) and z(s,N) to columns.
    All x come first, then y for every state, then z. x and z exist for states in end components only.
    """

    def __init__(self, bits, num_choices, x_offsets, y_offsets, z_offsets, num_x, num_y, num_z):
        self._bits = bits
        self._num_patterns = 1 << bits
        self._num_choices = tuple(num_choices)
        self._x_offsets = tuple(x_offsets)
        self._y_offsets = tuple(y_offsets)
        self._z_offsets = tuple(z_offsets)
        self.num_x = num_x
        self.num_y = num_y
        self.num_z = num_z

    @property
    def bits(self):
        return self._bits

    @property
    def num_patterns(self):
        return self._num_patterns

    def num_states(self):
        return len(self._y_offsets)

    def num_variables(self):
        return self.num_x + self.num_y + self.num_z

    def is_mec_state(self, state):
        return self._x_offsets[state] != UNDEFINED

    def _valid_action(self, state, action):
        return 0 <= state < len(self._num_choices) and 0 <= action < self._num_choices[state]

    def _valid_pattern(self, pattern):
        return 0 <= pattern < self._num_patterns

    def var_x(self, state, action, pattern):
        if not self._valid_action(state, action) or not self._valid_pattern(pattern):
            return UNDEFINED
        offset = self._x_offsets[state]
        if offset == UNDEFINED:
            return UNDEFINED
        return offset + action * self._num_patterns + pattern

    def var_y(self, state, action):
        if not self._valid_action(state, action):
            return UNDEFINED
        return self._y_offsets[state] + action

    def var_z(self, state, pattern):
        if not 0 <= state < len(self._z_offsets) or not self._valid_pattern(pattern):
            return UNDEFINED
        offset = self._z_offsets[state]
        if offset == UNDEFINED:
            return UNDEFINED
        return offset + pattern

    def x_offset(self, state):
        return self._x_offsets[state]

    def y_offset(self, state):
        return self._y_offsets[state]

    def z_offset(self, state):
        return self._z_offsets[state]

    def variable_name(self, column):
        """
        Readable name of a column, e.g. x_3_1_2.
        """
        if not 0 <= column < self.num_variables():
            raise IndexError("Column {} out of range".format(column))
        for state in range(self.num_states()):
            offset = self._x_offsets[state]
            width = self._num_choices[state] * self._num_patterns
            if offset != UNDEFINED and offset <= column < offset + width:
                action, pattern = divmod(column - offset, self._num_patterns)
                return "x_{}_{}_{}".format(state, action, pattern)
            offset = self._y_offsets[state]
            if offset <= column < offset + self._num_choices[state]:
                return "y_{}_{}".format(state, column - offset)
            offset = self._z_offsets[state]
            if offset != UNDEFINED and offset <= column < offset + self._num_patterns:
                return "z_{}_{}".format(state, column - offset)
        raise AssertionError("Column {} not covered".format(column))


class VariableIndexBuilder:
    """
    Computes the offsets of a VariableIndex from the model and its end components.
    """

    def __init__(self, model, mecs, bits):
        self._model = model
        self._mec_states = set()
        for mec in mecs:
            self._mec_states.update(mec)
        self._bits = bits

    def build(self):
        num_states = self._model.num_states()
        num_patterns = 1 << self._bits
        num_choices = [self._model.num_choices(s) for s in range(num_states)]

        column = 0
        x_offsets = [UNDEFINED] * num_states
        for state in range(num_states):
            if state in self._mec_states:
                x_offsets[state] = column
                column += num_choices[state] * num_patterns
        num_x = column

        y_offsets = [UNDEFINED] * num_states
        for state in range(num_states):
            y_offsets[state] = column
            column += num_choices[state]
        num_y = column - num_x

        z_offsets = [UNDEFINED] * num_states
        for state in range(num_states):
            if state in self._mec_states:
                z_offsets[state] = column
                column += num_patterns
        num_z = column - num_x - num_y

        logger.info("Variable index: %s x, %s y, %s z columns (%s bits)", num_x, num_y, num_z, self._bits)
        return VariableIndex(self._bits, num_choices, x_offsets, y_offsets, z_offsets, num_x, num_y, num_z)
