import logging
import time

from mlrsynth.analysis.mec import ECComputer
from mlrsynth.config import configuration
from mlrsynth.data.constraint import Semantics
from mlrsynth.data.distribution import Distribution
from mlrsynth.data.model_type import ModelType
from mlrsynth.data.point import Point
from mlrsynth.exceptions.dimension_not_supported_error import DimensionNotSupportedError
from mlrsynth.exceptions.solver_error import SolverError
from mlrsynth.exceptions.unsupported_query import UnsupportedQuery
from mlrsynth.lp.backends import create_solver
from mlrsynth.lp.solver import SolverStatus
from mlrsynth.multilongrun.encoder import LongRunEncoder
from mlrsynth.multilongrun.indexer import VariableIndexBuilder, compute_bits
from mlrsynth.multilongrun.views import ModelView, MDPView, ProductView
from mlrsynth.strategy.multilongrun_strategy import MultiLongRunStrategy
from mlrsynth.strategy.xin_strategy import XiNStrategy

logger = logging.getLogger(__name__)


class LongRunResult:
    """
    Result of a long-run query: the solver status and either the truth value (no objective)
    or the optimal long-run value of the objective.
    """

    def __init__(self, status, value):
        self.status = status
        self.value = value

    def is_feasible(self):
        return self.status == SolverStatus.OPTIMAL

    def __bool__(self):
        return self.is_feasible()

    def __str__(self):
        return "{} ({})".format(self.value, self.status)


class MultiLongRun:
    """
    Synthesis of strategies for multiple long-run average constraints and objectives.
    One instance answers one query: it owns the variable index, the encoding and the solver.
    """

    def __init__(self, model, constraints, objectives, backend=None, semantics=None):
        """
        Constructor.
        :param model: MDP or ModelView.
        :param constraints: List of Constraint.
        :param objectives: List of Objective.
        :param backend: Name of the LP backend, the configured one if None.
        :param semantics: Semantics of the probabilistic constraints, the configured one if None.
        """
        self.model = model if isinstance(model, ModelView) else MDPView(model)
        self.constraints = list(constraints)
        self.objectives = list(objectives)
        self._backend = backend
        if semantics is None:
            semantics = Semantics.from_string(configuration.get_semantics())
        self.semantics = semantics

        num_probabilistic = sum(1 for c in self.constraints if c.is_probabilistic())
        self.bits = compute_bits(num_probabilistic, semantics)

        start = time.time()
        self.mecs = ECComputer(self.model).compute_mecs()
        self.index = VariableIndexBuilder(self.model, self.mecs, self.bits).build()
        self._encoder = LongRunEncoder(self.model, self.index, self.mecs, self.constraints, semantics)
        logger.info("Prepared long-run query with %s end components in %.3fs", len(self.mecs), time.time() - start)
        self._solver = None

    def is_mec_state(self, state):
        return self.index.is_mec_state(state)

    def create_lp(self):
        """
        Allocate the solver and add all rows.
        """
        start = time.time()
        self._solver = create_solver(self._backend, self.index.num_variables())
        self._encoder.encode(self._solver)
        logger.info("Built linear program in %.3fs", time.time() - start)

    def _ensure_lp(self):
        if self._solver is None:
            self.create_lp()

    def _solve(self):
        """
        Run the solver. Only optimality and infeasibility are answers to the query.
        :return: SolverStatus, either OPTIMAL or INFEASIBLE.
        """
        return self._check_status(self._solver.solve())

    @staticmethod
    def _check_status(status):
        if status not in (SolverStatus.OPTIMAL, SolverStatus.INFEASIBLE):
            raise SolverError("Linear program could not be solved, the solver reports {}".format(status), status)
        return status

    def solve_default(self):
        """
        Solve the query. Without objective, the result value tells whether the constraints are satisfiable.
        With one objective, it is the optimal long-run value, None if the constraints are not satisfiable.
        :return: LongRunResult.
        """
        if len(self.objectives) > 1:
            raise DimensionNotSupportedError("At most one objective is supported, use solve_multi", 0, 1,
                                             len(self.objectives))
        self._ensure_lp()
        if self.objectives:
            self._solver.set_objective(self._encoder.objective_row(self.objectives[0]), True)
        status = self._solve()
        if not self.objectives:
            return LongRunResult(status, self._solver.get_boolean_result())
        value = self._solver.get_numeric_result()
        if value is not None and not self.objectives[0].is_maximising():
            value = -value
        return LongRunResult(status, value)

    def solve_multi(self, weights):
        """
        Maximise the weighted sum of two maximising objectives.
        :param weights: Pair of non-negative weights.
        :return: Point of the achieved objective values, None if the constraints are not satisfiable.
        """
        if len(weights) != 2 or len(self.objectives) != 2:
            raise DimensionNotSupportedError("Only two-dimensional weighted queries are supported", 2, 2,
                                             len(self.objectives))
        for objective in self.objectives:
            if not objective.is_maximising():
                raise UnsupportedQuery("Only maximising objectives are supported in weighted queries")
        self._ensure_lp()
        rows = [self._encoder.objective_row(objective) for objective in self.objectives]
        weighted = dict()
        for weight, row in zip(weights, rows):
            for column, coefficient in row.items():
                weighted[column] = weighted.get(column, 0.0) + weight * coefficient
        self._solver.set_objective(weighted, True)
        if self._solve() != SolverStatus.OPTIMAL:
            return None
        values = self._solver.get_variable_values()
        point = Point(*[sum(c * values[v] for v, c in row.items()) for row in rows])
        logger.debug("Weights %s give point %s", tuple(weights), point)
        return point

    def get_variable_values(self):
        """
        :return: Solution vector of the last solve, None if there is none.
        """
        if self._solver is None:
            return None
        return self._solver.get_variable_values()

    def get_strategy(self, rng=None):
        """
        Build the controller from the last solution.
        :param rng: numpy random Generator the controller draws its recurrent strategy with.
        :return: MultiLongRunStrategy or None if the constraints are not satisfiable.
        """
        if self.model.model_type() == ModelType.DTMC:
            return None
        if self._solver is None or self._solver.status == SolverStatus.NOT_SOLVED:
            self.solve_default()
        self._check_status(self._solver.status)
        values = self._solver.get_variable_values()
        if values is None:
            return None
        start = time.time()
        epsilon = configuration.get_numerical_epsilon()

        transient = []
        for state in range(self.model.num_states()):
            frequencies = dict()
            for action in range(self.model.num_choices(state)):
                value = values[self.index.var_y(state, action)]
                if value > epsilon:
                    frequencies[action] = value
            transient.append(Distribution(frequencies).normalised())

        switching = [None] * self.model.num_states()
        for mec in self.mecs:
            mass = dict()
            for state in mec:
                for action in range(self.model.num_choices(state)):
                    for pattern in range(self.index.num_patterns):
                        value = values[self.index.var_x(state, action, pattern)]
                        if value > epsilon:
                            mass[pattern] = mass.get(pattern, 0.0) + value
            distribution = Distribution(mass).normalised()
            for state in mec:
                switching[state] = distribution

        recurrent = [XiNStrategy(self.model, self.index, values, pattern, self.mecs).compute_approximation()
                     for pattern in range(self.index.num_patterns)]
        logger.info("Extracted strategy in %.3fs", time.time() - start)
        return MultiLongRunStrategy(transient, switching, recurrent, rng)


def verify_product(product, constraints, objectives=None, backend=None, semantics=None):
    """
    Check the constraints on the Markov chain a strategy induces.
    :param product: StrategyProduct.
    :param constraints: List of Constraint.
    :param objectives: Optional list with at most one Objective whose value is computed.
    :return: LongRunResult.
    """
    mlr = MultiLongRun(ProductView(product), constraints, objectives or [], backend, semantics)
    return mlr.solve_default()
