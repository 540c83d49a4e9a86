"""Tests for package configuration."""

import pytest

import gravitree
from gravitree import config, temp_config, solve_kepler, ConvergenceError


class TestConfig:
    """Global configuration object"""

    def test_defaults(self):
        """Package defaults"""
        assert config.EQUALITY_RTOL == 1e-12
        assert config.EQUALITY_ATOL == 1e-14
        assert config.KEPLER_MAX_ITERATIONS == 512
        assert config.KEPLER_TOLERANCE == 1e-8
        assert config.STRICT_VALIDATION is True
        assert config.DEFAULT_COMPILE is True

    def test_repr(self):
        """Formatted dump lists every setting"""
        text = repr(gravitree.config)
        assert "GravitreeConfig" in text
        assert "KEPLER_TOLERANCE" in text

    def test_reset(self):
        """reset restores defaults"""
        try:
            config.KEPLER_TOLERANCE = 1e-4
            config.reset()
            assert config.KEPLER_TOLERANCE == 1e-8
        finally:
            config.reset()


class TestTempConfig:
    """Temporary configuration changes"""

    def test_restored_after_block(self):
        """Values revert when the block exits"""
        with temp_config(KEPLER_MAX_ITERATIONS=3) as cfg:
            assert cfg.KEPLER_MAX_ITERATIONS == 3
        assert config.KEPLER_MAX_ITERATIONS == 512

    def test_restored_after_exception(self):
        """Values revert even when the block raises"""
        with pytest.raises(RuntimeError):
            with temp_config(STRICT_VALIDATION=False):
                raise RuntimeError("boom")
        assert config.STRICT_VALIDATION is True

    def test_unknown_attribute(self):
        """Unknown settings are rejected"""
        with pytest.raises(AttributeError, match="no attribute"):
            with temp_config(NOT_A_SETTING=1):
                pass

    def test_solver_follows_config(self):
        """The Kepler solver reads its iteration cap from config"""
        with temp_config(KEPLER_MAX_ITERATIONS=1):
            with pytest.raises(ConvergenceError):
                solve_kepler(1.0, 0.9)
