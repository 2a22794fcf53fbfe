"""Tests for least-squares refinement and the model registry."""

import numpy as np
import pytest

from powert_core.analysis.decay import DecaySeries
from powert_core.analysis.estimation import estimate_params
from powert_core.analysis.fitting import fit_decays, refine_params
from powert_core.analysis.models import get_model, list_models
from powert_core.types.analysis import Parameters

TRUE_PARAMS = Parameters(a0=1000.0, a=2.0, alpha=0.6, at=300.0, tau_t=0.5)


@pytest.fixture
def synthetic_decay():
    times = np.logspace(-2, 2, 200)
    return DecaySeries(times, TRUE_PARAMS.evaluate(times))


class TestModelRegistry:
    def test_list_models(self):
        assert list_models() == ["power_triplet"]

    def test_get_model(self):
        model = get_model("power_triplet")
        assert model.PARAM_NAMES == ("a0", "a", "alpha", "at", "tau_t")
        assert set(model.DEFAULTS) == set(model.PARAM_NAMES)
        assert set(model.BOUNDS) == set(model.PARAM_NAMES)

    def test_get_unknown_model(self):
        with pytest.raises(ValueError, match="power_triplet"):
            get_model("exponential")

    def test_model_eval_matches_parameters(self):
        model = get_model("power_triplet")
        t = np.array([0.0, 0.3, 4.0])
        np.testing.assert_allclose(model.eval(t, TRUE_PARAMS.to_dict()), TRUE_PARAMS.evaluate(t))


class TestRefineParams:
    """Refinement starting from the closed-form estimate."""

    def test_noise_free_decay(self, synthetic_decay):
        result = refine_params(synthetic_decay)

        assert result.success
        assert result.r_squared > 0.99

    def test_fixed_parameters_keep_initial_value(self, synthetic_decay):
        initial = TRUE_PARAMS.replace(a0=800.0, alpha=0.4)

        result = refine_params(synthetic_decay, initial, fixed=("a", "tau_t"))

        assert result.params.a == initial.a
        assert result.params.tau_t == initial.tau_t

    def test_all_fixed(self, synthetic_decay):
        result = refine_params(
            synthetic_decay, TRUE_PARAMS, fixed=("a0", "a", "alpha", "at", "tau_t")
        )
        assert not result.success
        assert result.params == TRUE_PARAMS

    def test_unknown_fixed_name(self, synthetic_decay):
        with pytest.raises(ValueError):
            refine_params(synthetic_decay, fixed=("beta",))

    def test_too_few_points(self):
        decay = DecaySeries([1.0, 2.0, 3.0], [10.0, 5.0, 2.5])
        initial = Parameters(100.0, 1.0, 1.0, 0.0, 0.3)

        result = refine_params(decay, initial)

        assert not result.success
        assert result.params == initial
        assert result.r_squared == 0.0

    def test_non_finite_points_are_ignored(self, synthetic_decay):
        signals = synthetic_decay.signals.copy()
        signals[::10] = np.nan
        decay = DecaySeries(synthetic_decay.times, signals)

        result = refine_params(decay, estimate_params(synthetic_decay))

        assert result.r_squared > 0.99

    def test_result_within_bounds(self, synthetic_decay):
        bounds = {"alpha": (0.0, 0.5)}
        result = refine_params(synthetic_decay, bounds=bounds)
        assert 0.0 <= result.params.alpha <= 0.5


def test_fit_decays_reports_progress(synthetic_decay):
    calls = []

    def callback(current, total, message):
        calls.append((current, total))

    results = fit_decays(
        [("first", synthetic_decay), ("second", synthetic_decay * 2.0)],
        progress_callback=callback,
    )

    assert [name for name, _ in results] == ["first", "second"]
    assert calls == [(0, 2), (1, 2)]
