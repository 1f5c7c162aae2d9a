"""Public CDN URLs for Sanity image assets."""

import re
from typing import Final

from limer_properties.models import PropertyImage

SANITY_IMAGE_CDN: Final = "https://cdn.sanity.io/images"

# image-<assetId>-<width>x<height>-<format>
_ASSET_REF = re.compile(r"^image-(?P<id>[A-Za-z0-9]+)-(?P<size>\d+x\d+)-(?P<format>[a-z0-9]+)$")


def image_url(image: PropertyImage, *, project_id: str, dataset: str) -> str | None:
    """CDN URL of an image, or None when its asset cannot be resolved.

    An asset already expanded with a ``url`` is returned as is; otherwise the
    URL is derived from the ``_ref`` asset id.
    """
    url = image.asset.get("url")
    if isinstance(url, str) and url:
        return url

    ref = image.asset.get("_ref")
    if not isinstance(ref, str) or not project_id:
        return None
    match = _ASSET_REF.match(ref)
    if match is None:
        return None
    return (
        f"{SANITY_IMAGE_CDN}/{project_id}/{dataset}/"
        f"{match['id']}-{match['size']}.{match['format']}"
    )
