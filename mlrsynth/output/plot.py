import logging
import tempfile

import matplotlib

matplotlib.use('Agg')  # use for plotting without X-server
from matplotlib import pyplot
from matplotlib import patches
from matplotlib.colors import ColorConverter

import numpy as np

from mlrsynth.config import configuration

logger = logging.getLogger(__name__)


def plot_pareto_curve(vertices, objective_names=("objective 1", "objective 2")):
    """
    Create pdf file displaying a Pareto curve.
    :param vertices: Vertices of the curve as returned by compute_pareto_curve.
    :param objective_names: Axis labels.
    :return: Path to pdf file containing the plot.
    """
    _, plot_path = tempfile.mkstemp(suffix=".pdf", prefix="pareto_", dir=configuration.get_plots_dir())
    Plot.plot_pareto(vertices, objective_names, path_to_save=plot_path)
    logger.info("Pareto curve rendered to {}".format(plot_path))
    return plot_path


class Plot:
    """
    Class handling plotting of Pareto curves.
    """

    @staticmethod
    def achievable_region(vertices):
        """
        Polygon of the points dominated by the vertices, closed towards the origin of the bounding box.
        :param vertices: Vertices sorted by the first coordinate.
        :return: numpy array of polygon corners.
        """
        xs = [v.x for v in vertices]
        ys = [v.y for v in vertices]
        low_x = min(0.0, min(xs))
        low_y = min(0.0, min(ys))
        corners = [(low_x, low_y), (low_x, vertices[0].y)]
        corners += [(v.x, v.y) for v in vertices]
        corners.append((vertices[-1].x, low_y))
        return np.array(corners)

    @staticmethod
    def plot_pareto(vertices, objective_names, path_to_save=None, display=False):
        """
        Plot the Pareto curve and the achievable region below it.
        :param vertices: Vertices sorted by the first coordinate.
        :param objective_names: Axis labels.
        :param path_to_save: Paths for pdf file or None if no file should be generated.
        :param display: If true, the plot will be displayed automatically.
        """
        logger.info("Plot Pareto curve")
        if len(vertices) == 0:
            raise ValueError("Cannot plot an empty Pareto curve.")

        fig = pyplot.figure()
        ax1 = fig.add_subplot(111)
        colorc = ColorConverter()

        region = patches.Polygon(Plot.achievable_region(vertices), fc=colorc.to_rgba("#4aa02c", 0.6),
                                 ec=colorc.to_rgba("#4aa02c"))
        ax1.add_patch(region)

        # Draw the vertices last
        ax1.plot([v.x for v in vertices], [v.y for v in vertices], "-", c='black')
        ax1.scatter([v.x for v in vertices], [v.y for v in vertices], marker='o', c='green')

        corners = Plot.achievable_region(vertices)
        margin = 0.05
        ax1.set_xlim([corners[:, 0].min() - margin, corners[:, 0].max() + margin])
        ax1.set_ylim([corners[:, 1].min() - margin, corners[:, 1].max() + margin])
        ax1.set_xlabel(objective_names[0])
        ax1.set_ylabel(objective_names[1])
        if path_to_save is not None:
            pyplot.savefig(path_to_save, format="PDF")
        if display:
            pyplot.show()
        pyplot.close(fig)
