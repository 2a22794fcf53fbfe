"""
Functional decay models for curve fitting.
"""

from powert_core.analysis.models import power_triplet

MODELS = {
    "power_triplet": power_triplet,
}


def get_model(model_name: str):
    if model_name not in MODELS:
        available = ", ".join(MODELS.keys())
        raise ValueError(f"Unknown model: {model_name}. Available models: {available}")
    return MODELS[model_name]


def list_models() -> list[str]:
    """Return all registered model names."""
    return list(MODELS.keys())


__all__ = [
    "get_model",
    "list_models",
    "MODELS",
]
