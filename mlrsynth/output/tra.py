import logging

from mlrsynth.util import write_string_to_file

logger = logging.getLogger(__name__)


def product_to_tra_string(product):
    """
    Explicit transition format of the reachable part of a strategy product.
    States are renumbered in order of discovery, state 0 being the first initial state.
    :param product: StrategyProduct.
    :return: String in .tra format (states transitions, then rows: source target probability).
    """
    states = product.reachable_states()
    number = {state: i for i, state in enumerate(states)}
    rows = []
    for state in states:
        distribution = product.transitions(state)
        for succ in sorted(distribution.support()):
            rows.append("{} {} {}".format(number[state], number[succ], repr(distribution.get(succ))))
    lines = ["{} {}".format(len(states), len(rows))] + rows
    return "\n".join(lines) + "\n"


def write_tra(product, path):
    """
    Write the reachable part of a strategy product to a .tra file.
    :return: Mapping from row numbers in the file to compound states.
    """
    write_string_to_file(path, product_to_tra_string(product))
    states = product.reachable_states()
    logger.info("Wrote product with %s states to %s", len(states), path)
    return dict(enumerate(states))
