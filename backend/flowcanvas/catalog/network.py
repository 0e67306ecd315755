"""Which step types can run on which execution network.

Every step works on mainnet. Devnet only supports the basic Solana
operations and the network-independent utility steps listed below.
"""

from flowcanvas.models.step import NetworkCompatibility
from flowcanvas.models.workflow import Network

UNIVERSAL_STEPS = frozenset(
    {
        "log",
        "delay",
        "if",
        "transform",
        "http_request",
        "discord_webhook",
        "telegram_message",
        "cooldown",
        "retry",
        "split_order",
    }
)

# Need real liquidity, mainnet APIs or mainnet-only programs
MAINNET_ONLY_STEPS = frozenset(
    {
        "dexscreener_price",
        "birdeye_price",
        "jupiter_swap",
        "raydium_swap",
        "pump_fun_buy",
        "pump_fun_sell",
        "lulo_lend",
        "jupiter_quote",
        "stop_loss",
        "take_profit",
        "trailing_stop",
        "limit_order",
        "volume_check",
        "liquidity_check",
        "rug_check",
        "copy_trade",
        "whale_alert",
        "slippage_estimator",
        "twap",
        "market_data",
    }
)

DEVNET_STEPS = UNIVERSAL_STEPS | frozenset(
    {
        "timer_trigger",
        "price_trigger",
        "onchain_trigger",
        "solana_balance",
        "solana_token_balance",
        "solana_transfer",
        "solana_stake",
        "solana_restake",
        "close_empty_token_accounts",
        "memo",
        "parse_transaction",
        "solana_confirm_tx",
        "get_token_data",
        "wait_for_confirmation",
        "balance_threshold_trigger",
        "transaction_log",
        "token_holders",
        "token_supply",
        "portfolio_value",
        "wallet_transactions",
        "average_cost",
        "position_size",
        "pnl_calculator",
        "paper_order",
        "pyth_price_feed_id",
        "pyth_price",
    }
)

MAINNET_ONLY_WARNING = "This node only works on mainnet. It will fail on devnet."

NETWORK_OPTIONS: list[dict[str, str]] = [
    {
        "value": Network.MAINNET.value,
        "label": "Mainnet",
        "description": "Production network with real funds",
    },
    {
        "value": Network.DEVNET.value,
        "label": "Devnet",
        "description": "Test network for development (free SOL from faucet)",
    },
]


def is_compatible(step_type: str, network: Network | str) -> bool:
    """Whether a step of ``step_type`` can run on ``network``."""
    if Network(network) == Network.MAINNET:
        return True
    return step_type in DEVNET_STEPS


def incompatible_types(step_types: list[str], network: Network | str) -> list[str]:
    """Filter ``step_types`` down to the ones that will fail on ``network``."""
    if Network(network) == Network.MAINNET:
        return []
    return [step_type for step_type in step_types if step_type not in DEVNET_STEPS]


def network_warning(step_type: str) -> str | None:
    """Advisory warning shown next to a mainnet-only step."""
    if step_type in MAINNET_ONLY_STEPS:
        return MAINNET_ONLY_WARNING
    return None


def check_compatibility(step_types: list[str], network: Network | str) -> NetworkCompatibility:
    """Compatibility report for a batch of step types."""
    incompatible = incompatible_types(step_types, network)
    warnings = {}
    for step_type in incompatible:
        warnings[step_type] = network_warning(step_type) or (
            f"Step type '{step_type}' is not available on {Network(network).value}."
        )
    return NetworkCompatibility(
        network=Network(network).value,
        incompatible=incompatible,
        warnings=warnings,
    )
