import os
import logging

import mlrsynth.util as util
from mlrsynth.util import Configuration
from mlrsynth.exceptions.configuration_error import ConfigurationError

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.realpath(__file__)), "mlrsynth.cfg")


class MlrSynthConfig(Configuration):
    # section names
    DIRECTORIES = "directories"
    LP = "lp"
    STRATEGY = "strategy"
    MULTILONGRUN = "multilongrun"
    DEPENDENCIES = "installed_deps"

    def __init__(self, config_file=DEFAULT_CONFIG_PATH):
        super().__init__(config_file)

    def is_module_available(self, module):
        if not self.has(MlrSynthConfig.DEPENDENCIES, module):
            return False
        return self.get_boolean(MlrSynthConfig.DEPENDENCIES, module)

    def has_gurobipy(self):
        return self.is_module_available("gurobipy")

    def has_matplotlib(self):
        return self.is_module_available("matplotlib")

    def get_lp_method(self):
        return self.get(MlrSynthConfig.LP, "method").strip().lower()

    def is_lp_silent(self):
        return self.get_boolean(MlrSynthConfig.LP, "silent")

    def get_approximation_epsilon(self):
        # Tolerance for freezing a phase-indexed policy into a memoryless table
        return self.get_float(MlrSynthConfig.STRATEGY, "approximation_epsilon")

    def get_numerical_epsilon(self):
        return self.get_float(MlrSynthConfig.STRATEGY, "numerical_epsilon")

    def get_phase_scale(self):
        scale = self.get_int(MlrSynthConfig.STRATEGY, "phase_scale")
        if scale <= 0:
            raise ConfigurationError("phase_scale must be positive, got {}".format(scale))
        return scale

    def get_semantics(self):
        value = self.get(MlrSynthConfig.MULTILONGRUN, "semantics").strip().lower()
        if value not in ("conjunctive", "joint"):
            raise ConfigurationError("Unknown semantics '{}', expected conjunctive or joint".format(value))
        return value

    def get_plots_dir(self):
        dir = self.get(MlrSynthConfig.DIRECTORIES, "plots")
        util.ensure_dir_exists(dir)
        return dir


configuration = MlrSynthConfig()


def load_configuration(config_file=None):
    """
    Re-read the configuration in place.
    :param config_file: Path to the configuration file. The packaged file is used if None.
    """
    configuration.reload(config_file if config_file is not None else DEFAULT_CONFIG_PATH)
    return configuration


TOOLNAME = "mlrsynth"

logging.basicConfig(filename='mlrsynth.log', level=logging.DEBUG)
ch = logging.StreamHandler()
ch.setLevel(logging.INFO)
logging.getLogger().addHandler(ch)
