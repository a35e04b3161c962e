from abc import ABCMeta, abstractmethod
from enum import Enum
import logging

from mlrsynth.exceptions.not_enough_information_error import NotEnoughInformationError

logger = logging.getLogger(__name__)


class Comparator(Enum):
    EQ = 0
    LE = 1
    GE = 2

    def __str__(self):
        return {Comparator.EQ: "=", Comparator.LE: "<=", Comparator.GE: ">="}[self]


class SolverStatus(Enum):
    NOT_SOLVED = 0
    OPTIMAL = 1
    INFEASIBLE = 2
    UNBOUNDED = 3
    ERROR = 4

    def __str__(self):
        return self.name.lower()


class SolverProxy(metaclass=ABCMeta):
    """
    Interface to a linear program solver.
    Columns 0 .. num_real-1 are continuous, the following num_binary columns are binary.
    Rows are given as dicts mapping column -> coefficient.
    """

    def __init__(self, num_real, num_binary=0):
        self.num_real = num_real
        self.num_binary = num_binary
        self.status = SolverStatus.NOT_SOLVED
        self._maximize = True
        self._has_objective = False
        self._num_rows = 0

    def num_variables(self):
        return self.num_real + self.num_binary

    def num_rows(self):
        return self._num_rows

    def _check_column(self, column):
        if not 0 <= column < self.num_variables():
            raise IndexError("Column {} out of range [0, {})".format(column, self.num_variables()))

    @abstractmethod
    def set_var_name(self, column, name):
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def set_var_bounds(self, column, lower, upper):
        """
        Set bounds of a column. None means unbounded.
        """
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def add_row(self, row, rhs, comparator, label=None):
        """
        Add a linear row: sum(coeff * var) comparator rhs.
        :param row: Dict column -> coefficient.
        :param rhs: Right-hand side.
        :param comparator: Comparator.
        :param label: Name of the row, for debugging output.
        """
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def set_objective(self, row, maximize=True):
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def solve(self):
        """
        Solve the linear program.
        :return: SolverStatus.
        """
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def _values(self):
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def _objective_value(self):
        raise NotImplementedError("Abstract function called")

    def _check_solved(self):
        if self.status == SolverStatus.NOT_SOLVED:
            raise NotEnoughInformationError("Solver has not been called yet")

    def get_variable_values(self):
        """
        :return: numpy array with one value per column, None if no solution exists.
        """
        self._check_solved()
        if self.status != SolverStatus.OPTIMAL:
            return None
        return self._values()

    def get_boolean_result(self):
        self._check_solved()
        return self.status == SolverStatus.OPTIMAL

    def get_numeric_result(self):
        """
        :return: Optimal objective value, None if no optimum exists.
        """
        self._check_solved()
        if not self._has_objective:
            raise NotEnoughInformationError("No objective has been set")
        if self.status != SolverStatus.OPTIMAL:
            return None
        return self._objective_value()
