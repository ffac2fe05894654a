"""
Shared Rich console instances with the rulesmith theme.
"""

from rich.console import Console
from rich.theme import Theme

RULESMITH_THEME = Theme({
    "brand": "#4682B4",           # Steel blue - headers, branding
    "success": "green",
    "warning": "yellow",
    "error": "red bold",
    "info": "white",
    "filepath": "#87CEEB",        # Sky blue - file paths
    "rule_id": "#B0C4DE",         # Light steel - rule and policy IDs
    "muted": "dim",
})

# Brand border style for panels
BRAND_BORDER = "#4682B4"

# stdout carries rule documents and engine output; status goes to stderr
console = Console(theme=RULESMITH_THEME)
err_console = Console(theme=RULESMITH_THEME, stderr=True)
