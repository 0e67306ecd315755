"""Tests for the network compatibility table."""

import pytest

from flowcanvas.catalog import (
    check_compatibility,
    incompatible_types,
    is_compatible,
    network_warning,
)
from flowcanvas.catalog.network import DEVNET_STEPS, MAINNET_ONLY_STEPS
from flowcanvas.models import Network


class TestIsCompatible:
    """Tests for is_compatible."""

    @pytest.mark.parametrize("step_type", ["jupiter_swap", "log", "custom_step"])
    def test_everything_runs_on_mainnet(self, step_type):
        assert is_compatible(step_type, Network.MAINNET)

    def test_devnet(self):
        assert is_compatible("solana_transfer", Network.DEVNET)
        assert is_compatible("log", "devnet")
        assert not is_compatible("jupiter_swap", Network.DEVNET)
        assert not is_compatible("custom_step", Network.DEVNET)

    def test_unknown_network(self):
        with pytest.raises(ValueError):
            is_compatible("log", "testnet")

    def test_tables_do_not_overlap(self):
        assert not DEVNET_STEPS & MAINNET_ONLY_STEPS


class TestIncompatibleTypes:
    """Tests for incompatible_types."""

    def test_mainnet_is_always_empty(self):
        assert incompatible_types(["jupiter_swap", "custom_step"], Network.MAINNET) == []

    def test_devnet_keeps_input_order(self):
        types = ["rug_check", "log", "jupiter_swap", "timer_trigger"]
        assert incompatible_types(types, Network.DEVNET) == ["rug_check", "jupiter_swap"]

    def test_empty_input(self):
        assert incompatible_types([], Network.DEVNET) == []


class TestWarnings:
    """Tests for warning messages."""

    def test_mainnet_only_warning(self):
        assert network_warning("jupiter_quote") == (
            "This node only works on mainnet. It will fail on devnet."
        )
        assert network_warning("log") is None

    def test_check_compatibility(self):
        report = check_compatibility(["log", "birdeye_price", "custom_step"], "devnet")

        assert report.network == "devnet"
        assert report.incompatible == ["birdeye_price", "custom_step"]
        assert report.warnings["custom_step"] == (
            "Step type 'custom_step' is not available on devnet."
        )

    def test_check_compatibility_mainnet(self):
        report = check_compatibility(["birdeye_price"], Network.MAINNET)
        assert report.incompatible == []
        assert report.warnings == {}
