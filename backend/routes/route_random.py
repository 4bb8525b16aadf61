"""
Random image endpoints backed by community-maintained GitHub indexes.
"""

from gateway.proxy_fetcher import url_from_field, url_from_string
from gateway.random_images import RandomImageSource, build_random_image_router

SOURCES = [
    RandomImageSource(
        name="Random Blue Archive",
        path="/random/ba",
        index_url="https://raw.githubusercontent.com/rynxzyy/blue-archive-r-img/refs/heads/main/links.json",
        extract_url=url_from_string,
        description="Get random Blue Archive character images",
    ),
    RandomImageSource(
        name="Random China",
        path="/random/china",
        index_url="https://github.com/ArifzynXD/database/raw/master/asupan/china.json",
        extract_url=url_from_field("url"),
        description="Get random China images",
    ),
]

router, metadata = build_random_image_router(SOURCES)
