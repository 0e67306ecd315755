"""Step documentation, output schemas and the "add next step" palette.

``STEP_DOCS`` is the output schema registry: for each documented step type
it lists the named output fields a step of that type produces. The reference
builder offers one expression per listed field.
"""

from typing import Any

from flowcanvas.models.step import (
    CategoryInfo,
    PaletteCategory,
    StepCategory,
    StepDoc,
    StepOption,
)


def _doc(
    type: str,
    name: str,
    category: StepCategory,
    description: str,
    inputs: list[str] | None = None,
    outputs: list[str] | None = None,
    example: str | None = None,
) -> StepDoc:
    return StepDoc(
        type=type,
        name=name,
        category=category,
        description=description,
        inputs=inputs or [],
        outputs=outputs or [],
        example=example,
    )


_DOCS = [
    # Triggers
    _doc(
        "timer_trigger",
        "Timer Trigger",
        StepCategory.TRIGGER,
        "Starts the workflow at regular intervals. Set the interval in seconds "
        "(minimum 60s for enabled workflows).",
        outputs=["timestamp", "intervalSeconds"],
        example="Use for periodic price checks, DCA buying, or scheduled tasks.",
    ),
    _doc(
        "price_trigger",
        "Price Trigger",
        StepCategory.TRIGGER,
        "Triggers when a token price crosses above or below a threshold.",
        inputs=["symbol", "direction", "threshold"],
        outputs=["price", "triggered"],
        example="Alert when SOL crosses above $100.",
    ),
    _doc(
        "onchain_trigger",
        "On-Chain Trigger",
        StepCategory.TRIGGER,
        "Triggers when transactions involving your watched wallets are detected on Solana.",
        inputs=["walletAddresses"],
        outputs=["signature", "event", "matchedWallets", "receivedAt"],
        example="React to wallet activity, swaps, or transfers in real-time.",
    ),
    # Actions
    _doc(
        "log",
        "Log",
        StepCategory.ACTION,
        "Logs a message to the execution output. Useful for debugging.",
        inputs=["message"],
        outputs=["message", "timestamp"],
    ),
    _doc(
        "delay",
        "Delay",
        StepCategory.ACTION,
        "Pauses execution for a specified number of milliseconds (max 30 seconds).",
        inputs=["ms"],
        outputs=["ms"],
    ),
    _doc(
        "transform",
        "Transform",
        StepCategory.ACTION,
        "Transforms data using template expressions. Access previous node outputs "
        "with {{nodes.<id>.output.<field>}}.",
        inputs=["value"],
        outputs=["value"],
        example="{{nodes.n1.output.price}} * 1.1 to add 10% markup.",
    ),
    _doc(
        "http_request",
        "HTTP Request",
        StepCategory.ACTION,
        "Makes HTTP requests to allowed external APIs.",
        inputs=["url", "method", "headers", "body"],
        outputs=["status", "body", "headers"],
    ),
    _doc(
        "twap",
        "TWAP",
        StepCategory.ACTION,
        "Time-Weighted Average Price execution over multiple intervals.",
        inputs=["inputMint", "outputMint", "totalAmount", "intervals", "intervalMinutes"],
        outputs=["schedule", "amountPerInterval"],
    ),
    # Logic
    _doc(
        "if",
        "Condition (If)",
        StepCategory.LOGIC,
        "Evaluates a condition. Downstream nodes only run if condition passes.",
        inputs=["left", "op", "right"],
        outputs=["passed", "op", "left", "right"],
        example="Check if {{nodes.n1.output.price}} > 100.",
    ),
    _doc(
        "cooldown",
        "Cooldown",
        StepCategory.LOGIC,
        "Prevents the workflow from running again within a cooldown period.",
        inputs=["key", "cooldownMs"],
        outputs=["passed", "remainingMs"],
    ),
    _doc(
        "stop_loss",
        "Stop Loss",
        StepCategory.LOGIC,
        "Triggers when price drops below a percentage of entry price.",
        inputs=["entryPrice", "stopLossPercent", "currentPrice"],
        outputs=["triggered", "triggerPrice"],
    ),
    _doc(
        "take_profit",
        "Take Profit",
        StepCategory.LOGIC,
        "Triggers when price rises above a percentage of entry price.",
        inputs=["entryPrice", "takeProfitPercent", "currentPrice"],
        outputs=["triggered", "triggerPrice"],
    ),
    _doc(
        "trailing_stop",
        "Trailing Stop",
        StepCategory.LOGIC,
        "Dynamic stop loss that moves up with price, locking in profits.",
        inputs=["mint", "trailPercentage"],
        outputs=["triggered", "highPrice", "triggerPrice"],
    ),
    _doc(
        "limit_order",
        "Limit Order",
        StepCategory.LOGIC,
        "Executes when price reaches target level.",
        inputs=["mint", "side", "targetPriceUsd", "amount"],
        outputs=["triggered", "currentPriceUsd"],
    ),
    _doc(
        "volume_check",
        "Volume Check",
        StepCategory.LOGIC,
        "Checks if 24h trading volume exceeds a threshold.",
        inputs=["mint", "minVolume24h"],
        outputs=["volume24h", "passed"],
    ),
    _doc(
        "liquidity_check",
        "Liquidity Check",
        StepCategory.LOGIC,
        "Verifies token has sufficient liquidity.",
        inputs=["mint", "minLiquidityUsd"],
        outputs=["liquidity", "passed"],
    ),
    _doc(
        "rug_check",
        "Rug Check",
        StepCategory.LOGIC,
        "Checks for rug pull warning signs (age, liquidity, holders).",
        inputs=["mint", "minTokenAgeMinutes", "maxTopHolderPercentage"],
        outputs=["passed", "warnings", "tokenAgeMinutes", "holderCount"],
    ),
    # Notifications
    _doc(
        "discord_webhook",
        "Discord Webhook",
        StepCategory.NOTIFY,
        "Sends a message to a Discord channel via webhook.",
        inputs=["credentialId", "content", "username"],
        outputs=["status", "sentAt"],
    ),
    _doc(
        "telegram_message",
        "Telegram Message",
        StepCategory.NOTIFY,
        "Sends a message via Telegram bot. Get a bot token from @BotFather.",
        inputs=["credentialId", "chatId", "text", "parseMode"],
        outputs=["status", "messageId", "sentAt"],
    ),
    # Market data
    _doc(
        "dexscreener_price",
        "DexScreener Price",
        StepCategory.MARKET,
        "Fetches current price and market data from DexScreener.",
        inputs=["pairAddress"],
        outputs=["priceUsd", "priceChange24h", "volume24h", "liquidity"],
    ),
    _doc(
        "birdeye_price",
        "Birdeye Price",
        StepCategory.MARKET,
        "Fetches token price from Birdeye API.",
        inputs=["mint"],
        outputs=["priceUsd", "priceChange24h"],
    ),
    _doc(
        "pyth_price_feed_id",
        "Pyth Feed ID",
        StepCategory.MARKET,
        "Gets the Pyth price feed ID for a token symbol.",
        inputs=["tokenSymbol"],
        outputs=["priceFeedId"],
    ),
    _doc(
        "pyth_price",
        "Pyth Price",
        StepCategory.MARKET,
        "Fetches price from Pyth oracle network.",
        inputs=["priceFeedId"],
        outputs=["price", "confidence", "timestamp"],
    ),
    _doc(
        "jupiter_quote",
        "Jupiter Quote",
        StepCategory.MARKET,
        "Gets a swap quote from Jupiter aggregator.",
        inputs=["inputMint", "outputMint", "amount"],
        outputs=["outAmount", "priceImpact", "route"],
    ),
    # Solana
    _doc(
        "solana_balance",
        "SOL Balance",
        StepCategory.SOLANA,
        "Fetches the SOL balance of a wallet.",
        inputs=["credentialId"],
        outputs=["solBalance", "walletAddress"],
    ),
    _doc(
        "solana_token_balance",
        "Token Balance",
        StepCategory.SOLANA,
        "Fetches the token balance for a specific mint.",
        inputs=["credentialId", "mint"],
        outputs=["balance", "decimals"],
    ),
    _doc(
        "solana_transfer",
        "Transfer",
        StepCategory.SOLANA,
        "Transfers SOL or SPL tokens to another wallet.",
        inputs=["credentialId", "to", "amount", "mint"],
        outputs=["txSignature"],
    ),
    _doc(
        "jupiter_swap",
        "Jupiter Swap",
        StepCategory.SOLANA,
        "Swaps tokens using Jupiter aggregator for best rates.",
        inputs=["credentialId", "inputMint", "outputMint", "amount", "slippageBps"],
        outputs=["txSignature", "inputAmount", "outputAmount"],
    ),
    _doc(
        "raydium_swap",
        "Raydium Swap",
        StepCategory.SOLANA,
        "Swaps tokens on Raydium DEX.",
        inputs=["credentialId", "inputMint", "outputMint", "amount", "slippageBps"],
        outputs=["txSignature"],
    ),
    _doc(
        "pump_fun_buy",
        "Pump.fun Buy",
        StepCategory.SOLANA,
        "Buys tokens on Pump.fun.",
        inputs=["credentialId", "mint", "solAmount", "slippageBps"],
        outputs=["txSignature"],
    ),
    _doc(
        "pump_fun_sell",
        "Pump.fun Sell",
        StepCategory.SOLANA,
        "Sells tokens on Pump.fun.",
        inputs=["credentialId", "mint", "tokenAmount", "slippageBps"],
        outputs=["txSignature"],
    ),
    _doc(
        "solana_stake",
        "Stake SOL",
        StepCategory.SOLANA,
        "Stakes SOL to earn rewards.",
        inputs=["credentialId", "amount"],
        outputs=["txSignature"],
    ),
    _doc(
        "solana_restake",
        "Restake",
        StepCategory.SOLANA,
        "Restakes staking rewards to compound earnings.",
        inputs=["credentialId", "amount"],
        outputs=["txSignature"],
    ),
    _doc(
        "lulo_lend",
        "Lulo Lend",
        StepCategory.SOLANA,
        "Lends assets on Lulo protocol for yield.",
        inputs=["credentialId", "amount"],
        outputs=["txSignature"],
    ),
    _doc(
        "close_empty_token_accounts",
        "Close Empty Accounts",
        StepCategory.SOLANA,
        "Closes empty token accounts to reclaim SOL rent.",
        inputs=["credentialId"],
        outputs=["txSignature", "closedCount"],
    ),
    # Data
    _doc(
        "token_holders",
        "Token Holders",
        StepCategory.DATA,
        "Fetches token holder count and distribution.",
        inputs=["mint"],
        outputs=["holderCount", "top10Percentage"],
    ),
    _doc(
        "token_supply",
        "Token Supply",
        StepCategory.DATA,
        "Fetches token supply information.",
        inputs=["mint"],
        outputs=["totalSupply", "circulatingSupply"],
    ),
    _doc(
        "portfolio_value",
        "Portfolio Value",
        StepCategory.DATA,
        "Calculates total portfolio value in USD.",
        inputs=["credentialId"],
        outputs=["totalValueUsd", "solBalance", "tokens"],
    ),
    _doc(
        "get_token_data",
        "Token Metadata",
        StepCategory.DATA,
        "Fetches token metadata (name, symbol, decimals).",
        inputs=["mint"],
        outputs=["name", "symbol", "decimals", "logoUri"],
    ),
    _doc(
        "parse_transaction",
        "Parse Transaction",
        StepCategory.DATA,
        "Parses and enriches a Solana transaction with human-readable details "
        "including token swap info.",
        inputs=["signature"],
        outputs=[
            "signature",
            "parsed.type",
            "parsed.source",
            "parsed.description",
            "parsed.tokenInputMint",
            "parsed.tokenInputAmount",
            "parsed.tokenOutputMint",
            "parsed.tokenOutputAmount",
            "parsed.solSent",
            "parsed.solReceived",
            "parsed.fee",
            "parsed.feePayer",
        ],
    ),
    # Calculations
    _doc(
        "slippage_estimator",
        "Slippage Estimator",
        StepCategory.CALC,
        "Estimates price impact and slippage for a trade.",
        inputs=["inputMint", "outputMint", "amount"],
        outputs=["priceImpactPct", "outAmount"],
    ),
    _doc(
        "pnl_calculator",
        "P&L Calculator",
        StepCategory.CALC,
        "Calculates profit/loss for a position.",
        inputs=["entryPrice", "currentPrice", "quantity"],
        outputs=["pnl", "pnlPercent"],
    ),
    _doc(
        "position_size",
        "Position Size",
        StepCategory.CALC,
        "Calculates optimal position size based on risk.",
        inputs=["accountBalance", "riskPercent", "entryPrice", "stopLoss"],
        outputs=["positionSize", "riskAmount"],
    ),
]

STEP_DOCS: dict[str, StepDoc] = {doc.type: doc for doc in _DOCS}

_CATEGORY_LABELS: dict[StepCategory, str] = {
    StepCategory.TRIGGER: "Trigger",
    StepCategory.ACTION: "Action",
    StepCategory.LOGIC: "Logic",
    StepCategory.DATA: "Data",
    StepCategory.MARKET: "Market",
    StepCategory.SOLANA: "Solana",
    StepCategory.NOTIFY: "Notify",
    StepCategory.CALC: "Calculate",
}

CATEGORY_INFO: dict[StepCategory, CategoryInfo] = {
    info.category: info
    for info in [
        CategoryInfo(
            category=StepCategory.TRIGGER,
            label="Triggers",
            icon="⚡",
            description="Start your workflow",
            color="#8b5cf6",
        ),
        CategoryInfo(
            category=StepCategory.ACTION,
            label="Actions",
            icon="🚀",
            description="Execute operations",
            color="#3b82f6",
        ),
        CategoryInfo(
            category=StepCategory.LOGIC,
            label="Logic",
            icon="🔀",
            description="Control flow",
            color="#f59e0b",
        ),
        CategoryInfo(
            category=StepCategory.DATA,
            label="Data",
            icon="📊",
            description="Fetch information",
            color="#10b981",
        ),
        CategoryInfo(
            category=StepCategory.MARKET,
            label="Market",
            icon="📈",
            description="Price & quotes",
            color="#06b6d4",
        ),
    ]
}

STEP_OPTIONS: list[StepOption] = [
    StepOption(value=value, label=label, category=category, description=description)
    for value, label, category, description in [
        ("timer_trigger", "Timer", StepCategory.TRIGGER, "Run on schedule"),
        ("price_trigger", "Price Alert", StepCategory.TRIGGER, "Trigger on price"),
        ("onchain_trigger", "On-Chain", StepCategory.TRIGGER, "Watch wallet txs"),
        ("jupiter_swap", "Jupiter Swap", StepCategory.ACTION, "Swap tokens"),
        ("solana_transfer", "Transfer", StepCategory.ACTION, "Send SOL/tokens"),
        ("discord_webhook", "Discord", StepCategory.ACTION, "Send message"),
        ("telegram_message", "Telegram", StepCategory.ACTION, "Send message"),
        ("http_request", "HTTP Request", StepCategory.ACTION, "Call API"),
        ("log", "Log", StepCategory.ACTION, "Debug output"),
        ("if", "Condition", StepCategory.LOGIC, "If/else branch"),
        ("delay", "Delay", StepCategory.LOGIC, "Wait time"),
        ("transform", "Transform", StepCategory.LOGIC, "Modify data"),
        ("rug_check", "Rug Check", StepCategory.LOGIC, "Safety check"),
        ("solana_balance", "Balance", StepCategory.DATA, "Get SOL balance"),
        ("token_data", "Token Data", StepCategory.DATA, "Token info"),
        ("parse_transaction", "Parse TX", StepCategory.DATA, "Decode transaction"),
        ("dexscreener_price", "DEXScreener", StepCategory.MARKET, "Get price"),
        ("jupiter_quote", "Jupiter Quote", StepCategory.MARKET, "Get swap quote"),
        ("coingecko_price", "CoinGecko", StepCategory.MARKET, "Get price"),
    ]
]

# Configuration a freshly added step starts with, besides label and type
_DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "log": {"message": "hello"},
    "delay": {"ms": 1000},
    "http_request": {"url": "https://example.com", "method": "GET"},
    "timer_trigger": {"intervalSeconds": 60},
}


def get_step_doc(step_type: str) -> StepDoc | None:
    """Get the documentation for a step type, if any."""
    return STEP_DOCS.get(step_type)


def output_fields(step_type: str) -> list[str]:
    """Named output fields of a step type; empty when undocumented."""
    doc = STEP_DOCS.get(step_type)
    return list(doc.outputs) if doc else []


def category_label(category: StepCategory | str) -> str:
    try:
        return _CATEGORY_LABELS[StepCategory(category)]
    except ValueError:
        return "Unknown"


def options_for_category(category: StepCategory | str) -> list[StepOption]:
    return [opt for opt in STEP_OPTIONS if opt.category == category]


def palette() -> list[PaletteCategory]:
    """The "add next step" menu: categories in display order with their options."""
    return [
        PaletteCategory(info=info, options=options_for_category(category))
        for category, info in CATEGORY_INFO.items()
    ]


def default_step_data(step_type: str) -> dict[str, Any]:
    """Initial ``data`` for a newly added step of ``step_type``."""
    return {"label": step_type, "type": step_type, **_DEFAULT_CONFIG.get(step_type, {})}
