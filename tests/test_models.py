"""Tests for srcurves.models — the seven spawner-recruit models."""

import dataclasses
import math

import numpy as np
import pytest

from srcurves.errors import ParameterDomainError
from srcurves.models import (
    BevertonHolt,
    Cushing,
    DerisoSchnute,
    Gamma,
    GammaModel,
    LudwigWalters,
    Ricker,
    Shepherd,
    max_recruits,
    max_spawnrecruits,
    recruit,
    validate_model,
)
from srcurves.types import ModelKind


# ═══════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════

ALL_MODELS = [
    BevertonHolt(2.0, 0.5),
    Ricker(3.0, 0.1),
    LudwigWalters(2.0, 0.1, 1.5),
    Cushing(1.0, 0.5),
    DerisoSchnute(4.0, 0.2, 0.5),
    Shepherd(5.0, 0.01, 2.0),
    GammaModel(2.0, 0.5, 2.0),
]

# (model, upper end of a sweep that stays inside the curve's domain)
DOME_MODELS = [
    (Ricker(3.0, 0.1), 100.0),
    (LudwigWalters(2.0, 0.1, 1.5), 40.0),
    (DerisoSchnute(4.0, 0.2, 0.5), 10.0),   # 1 − βγS reaches 0 at S = 10
    (Shepherd(5.0, 0.01, 2.0), 100.0),
    (GammaModel(2.0, 0.5, 2.0), 40.0),
]


def _ids(models):
    return [type(m).__name__ for m in models]


# ═══════════════════════════════════════════════════════════════════════
# WORKED EXAMPLES
# ═══════════════════════════════════════════════════════════════════════

class TestWorkedExamples:
    def test_beverton_holt(self):
        m = BevertonHolt(alpha=2.0, beta=0.5)
        assert recruit(2.0, m) == pytest.approx(2.0)
        assert max_recruits(m) == pytest.approx(4.0)
        s, r = max_spawnrecruits(m)
        assert s == math.inf
        assert r == pytest.approx(4.0)

    def test_ricker(self):
        m = Ricker(alpha=3.0, beta=0.1)
        assert max_recruits(m) == pytest.approx(3.0 / (0.1 * math.e))
        assert max_recruits(m) == pytest.approx(11.036, abs=1e-3)
        s, r = max_spawnrecruits(m)
        assert s == pytest.approx(10.0)
        assert recruit(10.0, m) == pytest.approx(r, rel=1e-12)

    def test_cushing(self):
        m = Cushing(alpha=1.0, gamma=0.5)
        assert recruit(4.0, m) == pytest.approx(2.0)
        assert max_recruits(m) == math.inf
        assert max_spawnrecruits(m) == (math.inf, math.inf)

    def test_deriso_schnute_peak(self):
        """S* = 1/(β(1+γ)) = 10/3, R* = (α/β)(1+γ)^(−(1+γ)/γ) = 20/3.375."""
        m = DerisoSchnute(4.0, 0.2, 0.5)
        s, r = max_spawnrecruits(m)
        assert s == pytest.approx(10.0 / 3.0)
        assert r == pytest.approx(20.0 / 3.375)

    def test_shepherd_dome_peak(self):
        """γ = 2: S* = (β(γ−1))^(−1/γ) = 10, R* = 5·10/(1+1) = 25."""
        m = Shepherd(5.0, 0.01, 2.0)
        s, r = max_spawnrecruits(m)
        assert s == pytest.approx(10.0)
        assert r == pytest.approx(25.0)

    def test_gamma_peak(self):
        """S* = γ/β = 4, R* = α(γ/β)^γ e^(−γ) = 32 e^(−2)."""
        m = GammaModel(2.0, 0.5, 2.0)
        s, r = max_spawnrecruits(m)
        assert s == pytest.approx(4.0)
        assert r == pytest.approx(32.0 * math.exp(-2.0))

    def test_ludwig_walters_reduces_to_ricker(self):
        """γ = 1 collapses Ludwig-Walters onto Ricker."""
        lw = LudwigWalters(3.0, 0.1, 1.0)
        rk = Ricker(3.0, 0.1)
        assert max_spawnrecruits(lw) == pytest.approx(max_spawnrecruits(rk))
        S = np.linspace(0.0, 50.0, 101)
        np.testing.assert_allclose(recruit(S, lw), recruit(S, rk), rtol=1e-12)


# ═══════════════════════════════════════════════════════════════════════
# INVARIANTS ACROSS THE FAMILY
# ═══════════════════════════════════════════════════════════════════════

class TestFamilyInvariants:
    @pytest.mark.parametrize("model", ALL_MODELS, ids=_ids(ALL_MODELS))
    def test_zero_spawners_zero_recruits(self, model):
        assert recruit(0.0, model) == 0.0

    @pytest.mark.parametrize(
        "model,s_max", DOME_MODELS, ids=_ids(m for m, _ in DOME_MODELS)
    )
    def test_non_negative(self, model, s_max):
        R = recruit(np.linspace(0.0, s_max, 2001), model)
        assert np.all(R >= 0.0)

    @pytest.mark.parametrize(
        "model,s_max", DOME_MODELS, ids=_ids(m for m, _ in DOME_MODELS)
    )
    def test_max_matches_dense_sweep(self, model, s_max):
        R = recruit(np.linspace(0.0, s_max, 200_001), model)
        assert R.max() == pytest.approx(max_recruits(model), rel=1e-6)
        assert R.max() <= max_recruits(model) * (1.0 + 1e-12)

    @pytest.mark.parametrize(
        "model,s_max", DOME_MODELS, ids=_ids(m for m, _ in DOME_MODELS)
    )
    def test_peak_value_at_peak_abundance(self, model, s_max):
        s_peak, r_peak = max_spawnrecruits(model)
        assert 0.0 < s_peak < s_max
        assert recruit(s_peak, model) == pytest.approx(r_peak, rel=1e-10)

    @pytest.mark.parametrize(
        "model,s_max", DOME_MODELS, ids=_ids(m for m, _ in DOME_MODELS)
    )
    def test_rises_then_falls(self, model, s_max):
        s_peak, _ = max_spawnrecruits(model)
        below = recruit(np.linspace(0.0, s_peak, 1000), model)
        above = recruit(np.linspace(s_peak, s_max, 1000), model)
        assert np.all(np.diff(below) > 0)
        assert np.all(np.diff(above) < 0)

    def test_beverton_holt_approaches_asymptote(self):
        m = BevertonHolt(2.0, 0.5)
        R = recruit(np.geomspace(1e-3, 1e9, 500), m)
        assert np.all(np.diff(R) > 0)
        assert R[-1] == pytest.approx(max_recruits(m), rel=1e-6)
        assert np.all(R < max_recruits(m))

    @pytest.mark.parametrize(
        "model", [Cushing(1.0, 0.5), Shepherd(1.0, 0.5, 0.5)],
        ids=["Cushing", "Shepherd-gamma<1"],
    )
    def test_unbounded_keeps_rising(self, model):
        R = recruit(np.geomspace(1.0, 1e12, 200), model)
        assert np.all(np.diff(R) > 0)
        assert max_recruits(model) == math.inf
        assert max_spawnrecruits(model)[0] == math.inf


# ═══════════════════════════════════════════════════════════════════════
# SPECIAL CASES AND LIMITS
# ═══════════════════════════════════════════════════════════════════════

class TestShepherdPiecewise:
    def test_gamma_one_is_beverton_holt(self):
        sh = Shepherd(2.0, 0.5, 1.0)
        bh = BevertonHolt(2.0, 0.5)
        assert max_recruits(sh) == max_recruits(bh)
        assert max_spawnrecruits(sh) == max_spawnrecruits(bh)

    def test_gamma_one_recruit_matches_beverton_holt(self):
        S = np.linspace(0.0, 100.0, 51)
        np.testing.assert_allclose(
            recruit(S, Shepherd(2.0, 0.5, 1.0)),
            recruit(S, BevertonHolt(2.0, 0.5)),
            rtol=1e-14,
        )

    def test_gamma_below_one_unbounded(self):
        m = Shepherd(2.0, 0.5, 0.7)
        assert max_recruits(m) == math.inf
        assert max_spawnrecruits(m) == (math.inf, math.inf)

    def test_gamma_above_one_finite(self):
        m = Shepherd(2.0, 0.5, 3.0)
        s, r = max_spawnrecruits(m)
        assert math.isfinite(s) and math.isfinite(r)
        assert s == pytest.approx((0.5 * 2.0) ** (-1.0 / 3.0))

    def test_uses_own_beta(self):
        """Two Shepherd curves differing only in β must differ."""
        a = Shepherd(2.0, 0.5, 2.0)
        b = Shepherd(2.0, 0.05, 2.0)
        assert recruit(3.0, a) == pytest.approx(6.0 / (1.0 + 0.5 * 9.0))
        assert recruit(3.0, b) == pytest.approx(6.0 / (1.0 + 0.05 * 9.0))


class TestDerisoSchnutePiecewise:
    def test_gamma_minus_one_is_beverton_holt(self):
        ds = DerisoSchnute(2.0, 0.5, -1.0)
        bh = BevertonHolt(2.0, 0.5)
        assert max_recruits(ds) == max_recruits(bh)
        assert max_spawnrecruits(ds) == max_spawnrecruits(bh)

    def test_gamma_below_minus_one_unbounded(self):
        m = DerisoSchnute(1.0, 1.0, -2.0)
        assert max_recruits(m) == math.inf
        assert max_spawnrecruits(m) == (math.inf, math.inf)
        R = recruit(np.geomspace(1.0, 1e12, 100), m)
        assert np.all(np.diff(R) > 0)


class TestGammaModel:
    def test_alias(self):
        assert Gamma is GammaModel

    @pytest.mark.parametrize("gamma", [0.0, -1.0, float('nan')])
    def test_rejects_non_positive_gamma(self, gamma):
        with pytest.raises(ParameterDomainError, match="gamma must be > 0"):
            GammaModel(1.0, 0.5, gamma)

    def test_domain_error_is_value_error(self):
        with pytest.raises(ValueError):
            GammaModel(1.0, 0.5, 0.0)

    def test_domain_error_attributes(self):
        with pytest.raises(ParameterDomainError) as info:
            GammaModel(1.0, 0.5, -1.0)
        err = info.value
        assert err.model == "GammaModel"
        assert err.parameter == "gamma"
        assert err.value == -1.0
        assert err.constraint == "> 0"

    def test_gamma_one_matches_ricker(self):
        g = GammaModel(3.0, 0.1, 1.0)
        rk = Ricker(3.0, 0.1)
        S = np.linspace(0.0, 60.0, 121)
        np.testing.assert_allclose(recruit(S, g), recruit(S, rk), rtol=1e-12)
        assert max_spawnrecruits(g) == pytest.approx(max_spawnrecruits(rk))

    def test_beta_zero_is_cushing(self):
        g = GammaModel(1.5, 0.0, 0.5)
        c = Cushing(1.5, 0.5)
        S = np.linspace(0.0, 100.0, 51)
        np.testing.assert_allclose(recruit(S, g), recruit(S, c), rtol=1e-14)

    def test_beta_zero_peak_is_cushing(self):
        assert max_spawnrecruits(GammaModel(1.5, 0.0, 0.5)) == (math.inf, math.inf)


# ═══════════════════════════════════════════════════════════════════════
# VALUE-OBJECT BEHAVIOUR & DISPATCH
# ═══════════════════════════════════════════════════════════════════════

class TestValueObjects:
    def test_immutable(self):
        m = Ricker(3.0, 0.1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            m.alpha = 4.0

    def test_equality_across_int_and_float(self):
        assert BevertonHolt(2, 1) == BevertonHolt(2.0, 1.0)
        assert hash(BevertonHolt(2, 1)) == hash(BevertonHolt(2.0, 1.0))

    def test_params(self):
        assert BevertonHolt(2.0, 0.5).params() == {'alpha': 2.0, 'beta': 0.5}
        assert Cushing(1.0, 0.5).params() == {'alpha': 1.0, 'gamma': 0.5}
        assert set(Shepherd(1.0, 1.0, 1.0).params()) == {'alpha', 'beta', 'gamma'}

    def test_kind(self):
        assert Ricker(1.0, 1.0).kind == ModelKind.RICKER
        assert GammaModel(1.0, 1.0, 1.0).kind == ModelKind.GAMMA

    def test_reference(self):
        assert "3.6" in BevertonHolt(1.0, 1.0).reference
        assert "3.21" in Shepherd(1.0, 1.0, 1.0).reference
        assert GammaModel(1.0, 1.0, 1.0).reference == ""

    def test_scalar_in_float_out(self):
        out = recruit(2.0, BevertonHolt(2.0, 0.5))
        assert type(out) is float

    def test_array_in_array_out(self):
        S = np.array([[0.0, 2.0], [6.0, 1e6]])
        R = recruit(S, BevertonHolt(2.0, 0.5))
        assert isinstance(R, np.ndarray)
        assert R.shape == S.shape
        assert R[0, 1] == pytest.approx(2.0)

    def test_list_input(self):
        R = recruit([0.0, 2.0], BevertonHolt(2.0, 0.5))
        np.testing.assert_allclose(R, [0.0, 2.0])

    def test_functions_match_methods(self):
        for m in ALL_MODELS:
            assert recruit(3.0, m) == m.recruit(3.0)
            assert max_spawnrecruits(m) == m.max_spawnrecruits()

    @pytest.mark.parametrize("fn", [max_recruits, max_spawnrecruits])
    def test_rejects_non_model(self, fn):
        with pytest.raises(TypeError, match="expected one of"):
            fn(object())

    def test_recruit_rejects_non_model(self):
        with pytest.raises(TypeError):
            recruit(1.0, {'alpha': 1.0, 'beta': 1.0})


# ═══════════════════════════════════════════════════════════════════════
# NON-FINITE RESULTS
# ═══════════════════════════════════════════════════════════════════════

class TestNonFinite:
    def test_zero_beta_gives_inf_with_warning(self):
        with pytest.warns(RuntimeWarning):
            assert max_recruits(BevertonHolt(2.0, 0.0)) == math.inf

    def test_negative_base_fractional_power_is_nan(self):
        m = DerisoSchnute(1.0, 1.0, 0.3)   # 1 − βγS < 0 for S > 10/3
        with pytest.warns(RuntimeWarning):
            assert math.isnan(recruit(10.0, m))

    def test_overflow_flagged(self):
        with pytest.warns(RuntimeWarning):
            assert recruit(1000.0, Ricker(1.0, -1.0)) == math.inf

    def test_errstate_escalates(self):
        with np.errstate(all='raise'):
            with pytest.raises(FloatingPointError):
                max_recruits(BevertonHolt(2.0, 0.0))

    def test_spawner_at_max_zero_beta(self):
        with pytest.warns(RuntimeWarning):
            s, _ = max_spawnrecruits(Ricker(1.0, 0.0))
        assert s == math.inf


# ═══════════════════════════════════════════════════════════════════════
# DOMAIN VALIDATION
# ═══════════════════════════════════════════════════════════════════════

class TestValidateModel:
    @pytest.mark.parametrize("model", ALL_MODELS, ids=_ids(ALL_MODELS))
    def test_valid_models_pass(self, model):
        assert validate_model(model) is model

    def test_negative_alpha_strict(self):
        with pytest.raises(ParameterDomainError, match="alpha must be > 0"):
            validate_model(BevertonHolt(-1.0, 0.5))

    def test_zero_beta_strict(self):
        with pytest.raises(ParameterDomainError, match="beta must be > 0"):
            validate_model(Ricker(1.0, 0.0))

    def test_gamma_beta_zero_allowed(self):
        validate_model(GammaModel(1.0, 0.0, 0.5))

    def test_gamma_beta_negative_rejected(self):
        with pytest.raises(ParameterDomainError, match=">= 0"):
            validate_model(GammaModel(1.0, -0.1, 0.5))

    def test_deriso_schnute_gamma_zero(self):
        with pytest.raises(ParameterDomainError, match="!= 0"):
            validate_model(DerisoSchnute(1.0, 1.0, 0.0))

    def test_deriso_schnute_negative_gamma_allowed(self):
        validate_model(DerisoSchnute(1.0, 1.0, -1.0))

    def test_non_finite(self):
        with pytest.raises(ParameterDomainError, match="finite"):
            validate_model(Cushing(float('inf'), 0.5))

    def test_lenient_warns_and_returns(self):
        m = Shepherd(-1.0, -2.0, 1.0)
        with pytest.warns(UserWarning) as record:
            out = validate_model(m, strict=False)
        assert out is m
        messages = [str(w.message) for w in record]
        assert any("alpha" in msg for msg in messages)
        assert any("beta" in msg for msg in messages)

    def test_construction_is_permissive(self):
        """Only GammaModel checks at construction."""
        m = BevertonHolt(-1.0, -1.0)
        assert m.alpha == -1.0


class TestPackageSurface:
    def test_top_level_exports(self):
        import srcurves

        m = srcurves.Ricker(3.0, 0.1)
        assert srcurves.max_spawnrecruits(m) == max_spawnrecruits(m)
        assert srcurves.Gamma is GammaModel
        assert srcurves.__version__ == "0.1.0"

    @pytest.mark.parametrize("model", ALL_MODELS, ids=_ids(ALL_MODELS))
    def test_evaluation_methods_annotated(self, model):
        for name in ("recruit", "recruits_per_spawner"):
            hints = getattr(type(model), name).__annotations__
            assert hints["spawners"] == "ArrayLike"
            assert hints["return"] == "Union[float, np.ndarray]"
