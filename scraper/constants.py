"""
Scrape constants: bot-challenge indicators and blocking statuses.

Budgets, viewport and launch arguments are configuration, see shared.config.
"""

from __future__ import annotations

# Substrings (case-insensitive) of a challenge/captcha interstitial.
BOT_BLOCK_INDICATORS = (
    "captcha",
    "verify you are human",
    "attention required",
    "just a moment",
    "access denied",
    "ddos protection",
)

# Only the head of the body is inspected; challenge pages are short.
BOT_BLOCK_BODY_CHARS = 2000

# HTTP statuses treated as "target refused automated access".
ACCESS_DENIED_STATUSES = frozenset({403, 429})

# Wait strategies accepted by Page.goto.
WAIT_UNTIL_NETWORK_IDLE = "networkidle"
WAIT_UNTIL_DOM_CONTENT_LOADED = "domcontentloaded"
