"""Upstream stubs shared by the resolver tests."""

import httpx

MARKETPLACE = "marketplace.example"
SHORT_LINK = "short.example"

LISTING_URL = f"https://{MARKETPLACE}/dp/B0ABCDEFGH"
LANDING_IMAGE = "https://m.media-amazon.com/images/I/71abcDEF12L._AC_SL1500_.jpg"
LANDING_IMAGE_NATIVE = "https://m.media-amazon.com/images/I/71abcDEF12L.jpg"
PREVIEW_IMAGE = "https://m.media-amazon.com/images/I/51xyzQRS34L._SL500_.jpg"


def listing_page(
    *,
    landing_image: str | None = LANDING_IMAGE,
    og_title: str | None = "USB-C Cable 2m",
    og_description: str | None = "Braided USB-C to USB-C cable",
    og_images: tuple[str, ...] = (PREVIEW_IMAGE,),
    title: str = "Amazon.co.jp: USB-C Cable 2m",
) -> str:
    """Build a small listing page with the requested pieces."""
    head = [f"<title>{title}</title>"]
    if og_title is not None:
        head.append(f'<meta property="og:title" content="{og_title}">')
    if og_description is not None:
        head.append(f'<meta property="og:description" content="{og_description}">')
    for image in og_images:
        head.append(f'<meta property="og:image" content="{image}">')
    body = ['<div id="nav-logo"><img src="https://images-fe.ssl-images-amazon.com/images/G/09/gno/sprites/nav-sprite.png"></div>']
    if landing_image is not None:
        body.append(
            f'<div id="imgTagWrapperId"><img alt="USB-C Cable" src="{landing_image}" '
            f'data-a-dynamic-image="{{}}" id="landingImage"></div>'
        )
    return "<html><head>{}</head><body>{}</body></html>".format("".join(head), "".join(body))


class FakeSleep:
    """Stand-in for asyncio.sleep that only records the requested delays."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class RecordingHandler:
    """MockTransport handler that records requests and delegates to ``respond``."""

    def __init__(self, respond):
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def user_agents(self) -> list[str]:
        return [r.headers.get("User-Agent", "") for r in self.requests]


