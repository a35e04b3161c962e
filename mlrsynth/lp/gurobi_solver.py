import logging
import time

import numpy as np
from gurobipy import Model, GRB, GurobiError, LinExpr

from mlrsynth.exceptions.backend_unavailable_error import BackendUnavailableError
from mlrsynth.lp.solver import SolverProxy, SolverStatus, Comparator

logger = logging.getLogger(__name__)

gurobi_status = {GRB.OPTIMAL: SolverStatus.OPTIMAL, GRB.INFEASIBLE: SolverStatus.INFEASIBLE,
                 GRB.UNBOUNDED: SolverStatus.UNBOUNDED}


class GurobiSolverProxy(SolverProxy):
    """
    Solver based on Gurobi. Rows are added to the model directly.
    """

    def __init__(self, num_real, num_binary=0, silent=True):
        super().__init__(num_real, num_binary)
        try:
            self._encoding = Model("multilongrun")
        except GurobiError as e:
            raise BackendUnavailableError("Gurobi cannot be initialised: {}".format(e), "gurobi")
        self._encoding.setParam('OutputFlag', not silent)
        self._vars = [self._encoding.addVar(lb=0.0, ub=GRB.INFINITY) for _ in range(num_real)]
        self._vars += [self._encoding.addVar(vtype=GRB.BINARY) for _ in range(num_binary)]
        self._encoding.update()

    def set_var_name(self, column, name):
        self._check_column(column)
        self._vars[column].VarName = name

    def set_var_bounds(self, column, lower, upper):
        self._check_column(column)
        self._vars[column].LB = -GRB.INFINITY if lower is None else lower
        self._vars[column].UB = GRB.INFINITY if upper is None else upper

    def _expression(self, row):
        for column in row:
            self._check_column(column)
        return LinExpr([c for c in row.values()], [self._vars[v] for v in row.keys()])

    def add_row(self, row, rhs, comparator, label=None):
        expression = self._expression(row)
        name = label if label is not None else ""
        if comparator == Comparator.EQ:
            self._encoding.addConstr(expression == rhs, name)
        elif comparator == Comparator.LE:
            self._encoding.addConstr(expression <= rhs, name)
        else:
            self._encoding.addConstr(expression >= rhs, name)
        self._num_rows += 1

    def set_objective(self, row, maximize=True):
        self._encoding.setObjective(self._expression(row), GRB.MAXIMIZE if maximize else GRB.MINIMIZE)
        self._maximize = maximize
        self._has_objective = True

    def solve(self):
        start = time.time()
        try:
            self._encoding.optimize()
            if self._encoding.Status == GRB.INF_OR_UNBD:
                # presolve cannot tell the two apart
                self._encoding.setParam("DualReductions", 0)
                self._encoding.optimize()
        except GurobiError as e:
            logger.error("Gurobi throws an error: %s", e)
            self.status = SolverStatus.ERROR
            raise BackendUnavailableError("Gurobi cannot solve the model: {}".format(e), "gurobi")
        self.status = gurobi_status.get(self._encoding.Status, SolverStatus.ERROR)
        logger.info("Gurobi finished after %.3fs with status %s", time.time() - start, self.status)
        return self.status

    def _values(self):
        return np.array([var.X for var in self._vars])

    def _objective_value(self):
        return self._encoding.ObjVal
