import asyncio
import sys
from pathlib import Path

# -------------------------------------------------------------------------
# Ensure the repository root (the folder that contains the top‑level
# `services` package) is on the import search path when run as a script.
# -------------------------------------------------------------------------
repo_root = Path(__file__).resolve().parents[1]   # `scripts/..` → repo root
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from services.renderer.page_renderer import PlaywrightPageRenderer


async def main() -> None:
    url = sys.argv[1] if len(sys.argv) > 1 else "https://example.com"
    text = sys.argv[2] if len(sys.argv) > 2 else "Example Domain"

    renderer = PlaywrightPageRenderer(settle_delay=0.5, presence_timeout=10)
    snapshot = await renderer.render(url, text)

    soup = snapshot.soup()
    title = soup.title.get_text(strip=True) if soup.title else ""
    images = soup.select("[data-rendered-src]")
    print("✅ Page title fetched:", title)
    print(f"   {len(snapshot.html)} bytes, {len(images)} images stamped")


if __name__ == "__main__":
    asyncio.run(main())
