"""Tests for DecayWorkspace."""

import numpy as np
import pytest

from powert_core.analysis.decay import DecaySeries
from powert_core.analysis.estimation import estimate_params
from powert_core.analysis.workspace import DecayWorkspace
from powert_core.config import WorkspaceConfig
from powert_core.types.analysis import PARAMETER_NAMES, Parameters

FOUR_POINTS = DecaySeries([1.0, 2.0, 3.0, 4.0], [100.0, 50.0, 25.0, 12.5])


def power_law(amplitude: float) -> DecaySeries:
    times = np.logspace(-1, 2, 50)
    return DecaySeries(times, amplitude / (1.0 + times))


@pytest.fixture
def workspace():
    ws = DecayWorkspace(sync_alpha=False, sync_tau_t=False)
    ws.load([("10us", power_law(800.0)), ("2us", FOUR_POINTS), ("1us", power_law(300.0))])
    return ws


class TestLoad:
    def test_load_estimates(self, workspace):
        assert len(workspace) == 3
        assert workspace.names == ["10us", "2us", "1us"]
        assert workspace["2us"].params == estimate_params(FOUR_POINTS)

    def test_load_replaces(self, workspace):
        assert workspace.load([("new", FOUR_POINTS)]) == 1
        assert workspace.names == ["new"]

    def test_load_appends(self):
        ws = DecayWorkspace(clear_before_load=False)
        ws.load([("a", FOUR_POINTS)])
        ws.load([("b", FOUR_POINTS)])
        assert ws.names == ["a", "b"]

    def test_load_nothing_keeps_entries(self, workspace):
        assert workspace.load([]) == 0
        assert len(workspace) == 3

    def test_lookup(self, workspace):
        assert workspace.index_of("1us") == 2
        assert workspace[1].name == "2us"
        with pytest.raises(KeyError):
            workspace["missing"]

    def test_sort_by_name(self, workspace):
        workspace.sort_by_name()
        assert workspace.names == ["1us", "2us", "10us"]

    def test_clear(self, workspace):
        workspace.clear()
        assert len(workspace) == 0


class TestSetParams:
    """Editing parameters, optionally shared between decays."""

    def test_no_sync(self, workspace):
        before = [entry.params for entry in workspace]
        workspace.set_params(0, before[0].replace(alpha=3.0, tau_t=2.0))

        assert workspace[0].params.alpha == 3.0
        assert workspace[1].params == before[1]
        assert workspace[2].params == before[2]

    def test_sync_tau_t(self, workspace):
        before = [entry.params for entry in workspace]
        workspace.sync_tau_t = True

        workspace.set_params(1, before[1].replace(tau_t=1.25))

        assert [entry.params.tau_t for entry in workspace] == [1.25, 1.25, 1.25]
        assert workspace[0].params.a0 == before[0].a0
        assert workspace[2].params.alpha == before[2].alpha

    def test_sync_alpha(self, workspace):
        workspace.sync_alpha = True
        workspace.set_params(0, workspace[0].params.replace(alpha=0.7))
        assert [entry.params.alpha for entry in workspace] == [0.7, 0.7, 0.7]

    def test_sync_only_changed_value(self, workspace):
        workspace.sync_alpha = True
        synced = [entry.params for entry in workspace]

        workspace.set_params(0, synced[0].replace(a0=5000.0))

        assert workspace[1].params == synced[1]

    def test_enabling_sync_copies_first_entry(self, workspace):
        first = workspace[0].params
        others = [entry.params for entry in workspace][1:]

        workspace.sync_alpha = True

        assert [entry.params.alpha for entry in workspace] == [first.alpha] * 3
        assert [entry.params.a0 for entry in workspace][1:] == [p.a0 for p in others]

        workspace.sync_tau_t = True
        workspace.set_params(0, first.replace(tau_t=0.9))
        workspace.sync_tau_t = False
        assert [entry.params.tau_t for entry in workspace] == [0.9, 0.9, 0.9]

    def test_sync_enabled_by_default(self):
        ws = DecayWorkspace()
        assert ws.sync_alpha and ws.sync_tau_t

        ws.load([("a", FOUR_POINTS), ("b", power_law(800.0))])

        last = estimate_params(power_law(800.0))
        assert [entry.params.alpha for entry in ws] == [last.alpha, last.alpha]
        assert ws["a"].params.a0 == 400.0

    def test_from_config(self):
        config = WorkspaceConfig(clear_before_load=False, sync_alpha=False, sync_tau_t=True)

        ws = DecayWorkspace.from_config(config)

        assert ws.clear_before_load is False
        assert ws.sync_alpha is False
        assert ws.sync_tau_t is True

    def test_reestimate(self, workspace):
        workspace.set_params(1, Parameters(1.0, 1.0, 1.0, 1.0, 1.0))
        workspace.reestimate()
        assert workspace[1].params == estimate_params(FOUR_POINTS)


class TestPaste:
    def test_apply_pasted(self, workspace):
        workspace.sync_alpha = workspace.sync_tau_t = True
        pasted = Parameters(10.0, 2.0, 0.5, 1.0, 0.2)

        updated = workspace.apply_pasted([("1us", pasted), ("unknown", pasted)])

        assert updated == 1
        assert workspace["1us"].params == pasted
        assert not workspace.sync_alpha
        assert not workspace.sync_tau_t
        assert workspace["10us"].params.alpha != pasted.alpha


def test_fitted(workspace):
    fitted = workspace.fitted(1)
    np.testing.assert_array_equal(fitted.times, FOUR_POINTS.times)
    np.testing.assert_allclose(fitted.signals, workspace[1].params.evaluate(FOUR_POINTS.times))


def test_to_frame(workspace):
    df = workspace.to_frame()
    assert list(df.columns) == ["name", *PARAMETER_NAMES]
    assert df["name"].tolist() == ["10us", "2us", "1us"]
    assert df.loc[1, "a0"] == 400.0
