from enum import Enum


class ModelType(Enum):
    """
    The type of a Markovian model handled by the synthesis engine.
    """
    DTMC = 0
    MDP = 1

    def __str__(self):
        return self.name


def model_is_nondeterministic(model_type):
    """
    Checks whether the model type is non-deterministic.
    :param model_type: Model type.
    :return: True, if the model type encodes a model with potential non-determinism.
    """
    assert isinstance(model_type, ModelType)
    return model_type == ModelType.MDP
