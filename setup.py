from setuptools import setup
from setuptools.command.develop import develop
from setuptools.command.install import install
import write_config
import sys
import re

if sys.version_info[0] == 2:
    sys.exit("Sorry, Python 2 is not supported.")


def obtain_version():
    """
    Obtains the version as specified in mlrsynth.
    :return: Version of mlrsynth.
    """
    verstr = "unknown"
    try:
        verstrline = open('mlrsynth/_version.py', "rt").read()
    except EnvironmentError:
        pass  # Okay, there is no version file.
    else:
        VSRE = r"^__version__ = ['\"]([^'\"]*)['\"]"
        mo = re.search(VSRE, verstrline, re.M)
        if mo:
            verstr = mo.group(1)
        else:
            raise RuntimeError("unable to find version in mlrsynth/_version.py")
    return verstr


class ConfigDevelop(develop):
    """
    Custom command to write the config files after installation
    """
    user_options = develop.user_options + [
        ('plots-dir=', None, 'Directory for plots'),
    ]

    def initialize_options(self):
        develop.initialize_options(self)
        self.plots_dir = None

    def finalize_options(self):
        develop.finalize_options(self)

    def run(self):
        develop.run(self)
        # Write config after installing the dependencies
        # as the optional modules are probed
        write_config.write_initial_config(self.plots_dir)


class ConfigInstall(install):
    """
    Custom command to write the config files after installation
    """

    user_options = install.user_options + [
        ('plots-dir=', None, 'Directory for plots'),
    ]

    def initialize_options(self):
        install.initialize_options(self)
        self.plots_dir = None

    def finalize_options(self):
        install.finalize_options(self)

    def run(self):
        install.run(self)
        # Write config after installing the dependencies
        # as the optional modules are probed
        write_config.write_initial_config(self.plots_dir)


setup(
    name="MLRSynth",
    version=obtain_version(),
    description="MLRSynth - Multi-objective long-run strategy synthesis for MDPs",
    packages=["mlrsynth", "mlrsynth.analysis", "mlrsynth.data", "mlrsynth.exceptions", "mlrsynth.input",
              "mlrsynth.lp", "mlrsynth.multilongrun", "mlrsynth.output", "mlrsynth.product", "mlrsynth.strategy"],
    py_modules=["write_config"],
    install_requires=['numpy', 'scipy>=1.9', 'networkx', 'matplotlib'],
    extras_require={
        'gurobi': ["gurobipy"],
        'test': ["pytest"],
    },
    package_data={
        'mlrsynth': ['mlrsynth.cfg'],
    },
    cmdclass={
        'develop': ConfigDevelop,
        'install': ConfigInstall,
    }
)
