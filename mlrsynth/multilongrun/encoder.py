import logging
from collections import defaultdict

from mlrsynth.data.constraint import Operator, Semantics
from mlrsynth.lp.solver import Comparator

logger = logging.getLogger(__name__)


def _add(row, column, coefficient):
    if coefficient != 0.0:
        row[column] = row.get(column, 0.0) + coefficient


class LongRunEncoder:
    """
    Builds the linear program whose solutions correspond to strategies meeting the long-run constraints.
    Variables x(s,a,N) are the long-run frequencies of taking a in s inside an end component when the
    constraints marked in bit-pattern N are targeted, y(s,a) the expected number of times a is taken in s
    before an end component is entered, and z(s,N) the probability of staying in the end component of s
    from s on while targeting N.
    """

    def __init__(self, model, index, mecs, constraints, semantics):
        """
        Constructor.
        :param model: ModelView.
        :param index: VariableIndex.
        :param mecs: Maximal end components of the model.
        :param constraints: List of Constraint.
        :param semantics: Semantics of the probabilistic constraints.
        """
        self._model = model
        self._index = index
        self._mecs = mecs
        self._semantics = semantics
        self._expectation = [c for c in constraints if not c.is_probabilistic()]
        self._probabilistic = [c for c in constraints if c.is_probabilistic()]
        self._mec_id = dict()
        for i, mec in enumerate(mecs):
            for state in mec:
                self._mec_id[state] = i

    def patterns(self):
        return range(self._index.num_patterns)

    def pattern_counts_for(self, pattern, constraint_index):
        """
        Whether the recurrent behaviour targeting the bit-pattern meets the given probabilistic constraint.
        """
        if self._semantics == Semantics.JOINT:
            return pattern == self._index.num_patterns - 1 and self._index.bits > 0
        return (pattern >> constraint_index) & 1 == 1

    def _stays_in_mec(self, state, action):
        mec = self._mec_id[state]
        return all(self._mec_id.get(succ) == mec for succ, prob in self._model.transitions(state, action) if prob > 0)

    def set_bounds(self, solver):
        index = self._index
        for state in range(self._model.num_states()):
            for action in range(self._model.num_choices(state)):
                column = index.var_y(state, action)
                solver.set_var_name(column, "y_{}_{}".format(state, action))
                solver.set_var_bounds(column, 0.0, None)
                if index.is_mec_state(state):
                    for pattern in self.patterns():
                        column = index.var_x(state, action, pattern)
                        solver.set_var_name(column, "x_{}_{}_{}".format(state, action, pattern))
                        solver.set_var_bounds(column, 0.0, 1.0)
            if index.is_mec_state(state):
                for pattern in self.patterns():
                    column = index.var_z(state, pattern)
                    solver.set_var_name(column, "z_{}_{}".format(state, pattern))
                    solver.set_var_bounds(column, 0.0, 1.0)

    def add_switching_normalisation(self, solver):
        row = dict()
        for mec in self._mecs:
            for state in mec:
                for pattern in self.patterns():
                    _add(row, self._index.var_z(state, pattern), 1.0)
        solver.add_row(row, 1.0, Comparator.EQ, "sum_z")

    def add_expectation_rows(self, solver):
        for i, constraint in enumerate(self._expectation):
            row = dict()
            for mec in self._mecs:
                for state in mec:
                    for action in range(self._model.num_choices(state)):
                        reward = self._model.reward(constraint.reward, state, action)
                        for pattern in self.patterns():
                            _add(row, self._index.var_x(state, action, pattern), reward)
            comparator = Comparator.GE if constraint.operator == Operator.R_GE else Comparator.LE
            solver.add_row(row, constraint.bound, comparator, "expectation_{}".format(i))

    def add_mec_linkage(self, solver):
        for i, mec in enumerate(self._mecs):
            for pattern in self.patterns():
                row = dict()
                for state in mec:
                    for action in range(self._model.num_choices(state)):
                        _add(row, self._index.var_x(state, action, pattern), 1.0)
                    _add(row, self._index.var_z(state, pattern), -1.0)
                solver.add_row(row, 0.0, Comparator.EQ, "mec_{}_{}".format(i, pattern))

    def add_transient_flow(self, solver):
        """
        For every state: inflow - outflow - switching = -(initial probability of the state).
        """
        index = self._index
        rows = defaultdict(dict)
        for state in range(self._model.num_states()):
            row = rows[state]
            for action in range(self._model.num_choices(state)):
                column = index.var_y(state, action)
                _add(row, column, -1.0)
                for succ, prob in self._model.transitions(state, action):
                    _add(rows[succ], column, prob)
            if index.is_mec_state(state):
                for pattern in self.patterns():
                    _add(row, index.var_z(state, pattern), -1.0)
        initial = self._model.initial_distribution()
        for state in range(self._model.num_states()):
            rhs = -initial.get(state)
            solver.add_row(rows[state], rhs, Comparator.EQ, "y_flow_{}".format(state))

    def add_occupation_conservation(self, solver):
        """
        For every end component state and bit-pattern: outflow equals inflow from the same end component.
        Actions leaving the end component get frequency zero.
        """
        index = self._index
        for pattern in self.patterns():
            rows = defaultdict(dict)
            for mec in self._mecs:
                for state in mec:
                    for action in range(self._model.num_choices(state)):
                        column = index.var_x(state, action, pattern)
                        if not self._stays_in_mec(state, action):
                            solver.add_row({column: 1.0}, 0.0, Comparator.EQ,
                                           "leave_{}_{}_{}".format(state, action, pattern))
                            continue
                        _add(rows[state], column, 1.0)
                        for succ, prob in self._model.transitions(state, action):
                            _add(rows[succ], column, -prob)
            for mec in self._mecs:
                for state in sorted(mec):
                    solver.add_row(rows[state], 0.0, Comparator.EQ, "x_flow_{}_{}".format(state, pattern))

    def add_commitment_rows(self, solver):
        """
        Recurrent behaviour targeting a constraint has to meet its bound on average in the end component.
        """
        for i, constraint in enumerate(self._probabilistic):
            sign = 1.0 if constraint.operator == Operator.R_GE else -1.0
            for m, mec in enumerate(self._mecs):
                for pattern in self.patterns():
                    if not self.pattern_counts_for(pattern, i):
                        continue
                    row = dict()
                    for state in mec:
                        for action in range(self._model.num_choices(state)):
                            coefficient = sign * (self._model.reward(constraint.reward, state, action) - constraint.bound)
                            _add(row, self._index.var_x(state, action, pattern), coefficient)
                    solver.add_row(row, 0.0, Comparator.GE, "commit_{}_{}_{}".format(i, m, pattern))

    def add_satisfaction_rows(self, solver):
        for i, constraint in enumerate(self._probabilistic):
            row = dict()
            for mec in self._mecs:
                for state in mec:
                    for pattern in self.patterns():
                        if self.pattern_counts_for(pattern, i):
                            _add(row, self._index.var_z(state, pattern), 1.0)
            solver.add_row(row, constraint.probability, Comparator.GE, "probability_{}".format(i))

    def encode(self, solver):
        """
        Add all rows to the solver.
        """
        self.set_bounds(solver)
        self.add_switching_normalisation(solver)
        self.add_expectation_rows(solver)
        self.add_mec_linkage(solver)
        self.add_transient_flow(solver)
        self.add_occupation_conservation(solver)
        self.add_commitment_rows(solver)
        self.add_satisfaction_rows(solver)
        logger.info("Encoded %s rows over %s columns", solver.num_rows(), self._index.num_variables())

    def objective_row(self, objective, weight=1.0):
        """
        Coefficients of the long-run average of the objective's reward, negated for minimisation,
        so that the row is always to be maximised.
        """
        sign = weight if objective.is_maximising() else -weight
        row = dict()
        for mec in self._mecs:
            for state in mec:
                for action in range(self._model.num_choices(state)):
                    reward = self._model.reward(objective.reward, state, action)
                    for pattern in self.patterns():
                        _add(row, self._index.var_x(state, action, pattern), sign * reward)
        return row
