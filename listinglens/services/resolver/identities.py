"""Client identities: the header sets a fetch can present itself with.

Preview bots (chat apps, social networks) are served the plain
link-preview markup that anti-bot checks leave alone, so they go first;
an ordinary desktop browser is the last resort.
"""

from __future__ import annotations

from dataclasses import dataclass

from listinglens.config import settings

_HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"


@dataclass(frozen=True)
class ClientIdentity:
    name: str
    user_agent: str
    extra_headers: tuple[tuple[str, str], ...] = ()

    def headers(self, accept_language: str | None = None) -> dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": _HTML_ACCEPT,
            "Accept-Language": accept_language or settings.ACCEPT_LANGUAGE,
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }
        headers.update(self.extra_headers)
        return headers


DISCORD_BOT = ClientIdentity(
    name="discordbot",
    user_agent="Mozilla/5.0 (compatible; Discordbot/2.0; +https://discordapp.com)",
)

TWITTER_BOT = ClientIdentity(
    name="twitterbot",
    user_agent="Twitterbot/1.0",
)

FACEBOOK_BOT = ClientIdentity(
    name="facebookexternalhit",
    user_agent="facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)",
)

BROWSER = ClientIdentity(
    name="browser",
    user_agent=(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36"
    ),
    extra_headers=(
        ("DNT", "1"),
        ("Upgrade-Insecure-Requests", "1"),
        ("Sec-Fetch-Dest", "document"),
        ("Sec-Fetch-Mode", "navigate"),
        ("Sec-Fetch-Site", "none"),
    ),
)

# Rotation order for the preview scan: chat platform, social networks, browser
PREVIEW_ROTATION: tuple[ClientIdentity, ...] = (
    DISCORD_BOT,
    TWITTER_BOT,
    FACEBOOK_BOT,
    BROWSER,
)
