'''
Decay traces, parameter estimation, model fitting and decay collections.
'''

from .decay import DecaySeries
from .estimation import estimate_params, linear_regression
from .models import get_model, list_models
from .fitting import refine_params, fit_decays
from .concatenate import ConcatenationEntry, DecayConcatenation
from .workspace import DecayWorkspace, WorkspaceEntry

__all__ = [
    "DecaySeries",
    "estimate_params",
    "linear_regression",
    "get_model",
    "list_models",
    "refine_params",
    "fit_decays",
    "ConcatenationEntry",
    "DecayConcatenation",
    "DecayWorkspace",
    "WorkspaceEntry",
]
