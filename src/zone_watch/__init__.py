"""Terminal control surface for price-alert zones."""

__all__ = [
    "adapters",
    "alerts",
    "console",
    "input",
    "market",
    "runtime",
    "save",
    "zones",
]

__version__ = "0.1.0"
