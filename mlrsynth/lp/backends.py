import importlib
import importlib.util
import logging

from mlrsynth.config import configuration
from mlrsynth.exceptions.backend_unavailable_error import BackendUnavailableError
from mlrsynth.exceptions.configuration_error import ConfigurationError

logger = logging.getLogger(__name__)


def _scipy_factory(num_real, num_binary, silent):
    from mlrsynth.lp.scipy_solver import ScipySolverProxy
    return ScipySolverProxy(num_real, num_binary, silent)


def _gurobi_factory(num_real, num_binary, silent):
    from mlrsynth.lp.gurobi_solver import GurobiSolverProxy
    return GurobiSolverProxy(num_real, num_binary, silent)


# backend name -> (factory, python module the backend needs)
_backends = {}


def register_backend(name, factory, module):
    """
    Register an LP backend.
    :param name: Name used in the configuration.
    :param factory: Callable (num_real, num_binary, silent) -> SolverProxy.
    :param module: Name of the python module the backend depends on.
    """
    _backends[name.lower()] = (factory, module)


def available_backends():
    """
    :return: Names of registered backends whose python module can be found.
    """
    return sorted(name for name, (_, module) in _backends.items() if importlib.util.find_spec(module) is not None)


def create_solver(name, num_real, num_binary=0):
    """
    Create a solver of the given backend.
    :param name: Backend name, the configured [lp] method if None.
    :param num_real: Number of continuous columns.
    :param num_binary: Number of binary columns.
    :return: SolverProxy.
    """
    if name is None:
        name = configuration.get_lp_method()
    key = name.lower()
    if key not in _backends:
        raise ConfigurationError("Unknown LP backend '{}', known are {}".format(name, sorted(_backends)))
    factory, module = _backends[key]
    if importlib.util.find_spec(module) is None:
        raise BackendUnavailableError("LP backend '{}' needs the python module {}".format(name, module), key)
    logger.debug("Create %s solver with %s real and %s binary columns", key, num_real, num_binary)
    return factory(num_real, num_binary, configuration.is_lp_silent())


register_backend("scipy", _scipy_factory, "scipy")
register_backend("gurobi", _gurobi_factory, "gurobipy")
