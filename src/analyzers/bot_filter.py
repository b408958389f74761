"""
Automation Account Filter.

Contributor credit is only given to human accounts. The substring check is
deliberately broad and also matches human logins that contain ``bot``.
"""

from typing import Optional

BOT_SUFFIX = "[bot]"
BOT_MARKER = "bot"

BOT_DENY_LIST = frozenset(
    [
        "dependabot[bot]",
        "renovate[bot]",
        "github-actions[bot]",
        "codecov[bot]",
        "greenkeeper[bot]",
        "mergify[bot]",
        "stale[bot]",
        "cla-bot[bot]",
        "cla-assistant[bot]",
        "homu[bot]",
        "bors[bot]",
        "rust-highfive[bot]",
        "rust-log-analyzer[bot]",
        "rust-timer[bot]",
        "rust-lang[bot]",
        "rust-lang-deprecated[bot]",
        "rust-lang-nursery[bot]",
        "rust-lang-tools[bot]",
        "rust-lang-wg[bot]",
        "rust-lang-wg-nursery[bot]",
        "rust-lang-wg-tools[bot]",
    ]
)


def is_excluded(login: Optional[str]) -> bool:
    """
    Check whether a login must never receive credit.

    Args:
        login (Optional[str]): Account login, None for deleted accounts

    Returns:
        bool: True for missing logins, ``[bot]`` accounts, logins containing
            ``bot`` and deny-listed automation accounts
    """
    if not login:
        return True
    return (
        login.endswith(BOT_SUFFIX) or BOT_MARKER in login or login in BOT_DENY_LIST
    )
