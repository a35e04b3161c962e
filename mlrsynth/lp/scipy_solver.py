import logging
import time

import numpy as np
from scipy import sparse
from scipy.optimize import linprog

from mlrsynth.lp.solver import SolverProxy, SolverStatus, Comparator

logger = logging.getLogger(__name__)

# status codes of scipy.optimize.linprog
linprog_status = {0: SolverStatus.OPTIMAL, 2: SolverStatus.INFEASIBLE, 3: SolverStatus.UNBOUNDED}


class ScipySolverProxy(SolverProxy):
    """
    Solver based on the HiGHS solvers shipped with scipy.
    Rows are collected and handed over as sparse matrices when solving.
    """

    def __init__(self, num_real, num_binary=0, silent=True):
        super().__init__(num_real, num_binary)
        n = self.num_variables()
        self._silent = silent
        self._names = [None] * n
        self._lower = np.zeros(n)
        self._upper = np.full(n, np.inf)
        self._upper[num_real:] = 1.0
        # coordinate lists for equality and upper-bound rows
        self._eq = ([], [], [])
        self._eq_rhs = []
        self._ub = ([], [], [])
        self._ub_rhs = []
        self._objective = np.zeros(n)
        self._result = None

    def set_var_name(self, column, name):
        self._check_column(column)
        self._names[column] = name

    def set_var_bounds(self, column, lower, upper):
        self._check_column(column)
        self._lower[column] = -np.inf if lower is None else lower
        self._upper[column] = np.inf if upper is None else upper

    def _append(self, target, rhs_list, row, factor, rhs):
        rows, cols, data = target
        index = len(rhs_list)
        for column, coefficient in row.items():
            self._check_column(column)
            if coefficient != 0.0:
                rows.append(index)
                cols.append(column)
                data.append(factor * coefficient)
        rhs_list.append(factor * rhs)

    def add_row(self, row, rhs, comparator, label=None):
        if comparator == Comparator.EQ:
            self._append(self._eq, self._eq_rhs, row, 1.0, rhs)
        elif comparator == Comparator.LE:
            self._append(self._ub, self._ub_rhs, row, 1.0, rhs)
        else:
            self._append(self._ub, self._ub_rhs, row, -1.0, rhs)
        self._num_rows += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Row %s: %s %s %s", label,
                         " + ".join("{}*{}".format(c, self._names[v] or v) for v, c in row.items()), comparator, rhs)

    def set_objective(self, row, maximize=True):
        self._objective = np.zeros(self.num_variables())
        for column, coefficient in row.items():
            self._check_column(column)
            self._objective[column] = coefficient
        self._maximize = maximize
        self._has_objective = True

    def _matrix(self, target, rhs_list):
        if not rhs_list:
            return None, None
        rows, cols, data = target
        matrix = sparse.coo_matrix((data, (rows, cols)), shape=(len(rhs_list), self.num_variables()))
        return matrix.tocsr(), np.array(rhs_list)

    def solve(self):
        a_eq, b_eq = self._matrix(self._eq, self._eq_rhs)
        a_ub, b_ub = self._matrix(self._ub, self._ub_rhs)
        c = -self._objective if self._maximize else self._objective
        integrality = None
        if self.num_binary > 0:
            integrality = np.zeros(self.num_variables())
            integrality[self.num_real:] = 1
        start = time.time()
        self._result = linprog(c, A_ub=a_ub, b_ub=b_ub, A_eq=a_eq, b_eq=b_eq,
                               bounds=np.column_stack((self._lower, self._upper)),
                               method="highs", integrality=integrality,
                               options={"disp": not self._silent})
        self.status = linprog_status.get(self._result.status, SolverStatus.ERROR)
        logger.info("HiGHS finished after %.3fs with status %s (%s)", time.time() - start, self.status,
                    self._result.message)
        return self.status

    def _values(self):
        return np.array(self._result.x)

    def _objective_value(self):
        return -self._result.fun if self._maximize else self._result.fun
