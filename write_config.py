#!/usr/bin/env python3

import configparser
import os
import importlib.util
import logging

thisfilepath = os.path.dirname(os.path.realpath(__file__))


def check_python_api(name):
    """
    Check if the required python module is present.
    :param name: Name of the python api.
    :return: True iff the api is present.
    """
    spec = importlib.util.find_spec(name)
    return spec is not None


def get_initial_config(config, plots_dir=None):
    # Setup paths
    config_dirs = {}
    config_dirs["tmp"] = os.path.join("/", "tmp", "mlrsynth")
    config_dirs["plots"] = plots_dir if plots_dir else os.path.join(config_dirs["tmp"], "plots")
    config["directories"] = config_dirs

    # Setup LP backend
    config_lp = {}
    config_lp["method"] = "scipy"
    config_lp["silent"] = str(True)
    config["lp"] = config_lp

    # Setup strategy constants
    config_strategy = {}
    config_strategy["approximation_epsilon"] = str(1e-6)
    config_strategy["numerical_epsilon"] = str(1e-12)
    config_strategy["phase_scale"] = str(1000)
    config["strategy"] = config_strategy

    config_multilongrun = {}
    config_multilongrun["semantics"] = "conjunctive"
    config["multilongrun"] = config_multilongrun

    # Setup optional dependencies
    config_deps = {}
    config_deps["gurobipy"] = str(check_python_api("gurobipy"))
    config_deps["matplotlib"] = str(check_python_api("matplotlib"))
    config["installed_deps"] = config_deps


def write_initial_config(plots_dir=None):
    print("Write config with plots directory {}".format(plots_dir))
    config = configparser.ConfigParser()
    get_initial_config(config, plots_dir)
    path = os.path.join(thisfilepath, "mlrsynth", "mlrsynth.cfg")
    logging.info("Writing config to " + path)
    with open(path, 'w') as configfile:
        config.write(configfile)


if __name__ == "__main__":
    write_initial_config()
