"""
Company Logo Loader.

Downloads the company logo referenced by CompanyInfo, validates it and
converts it into a PNG bitmap that ReportLab and openpyxl can embed. The
logo is cropped to a circle with a thin brand-blue ring, matching the
letterhead used on printed receipts.

A logo is decoration: every failure raises LogoError and the renderer
carries on without it.
"""

import io
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Tuple

from PIL import Image, ImageDraw, UnidentifiedImageError

from reports.exceptions import LogoError

logger = logging.getLogger(__name__)

# Size limits
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
MAX_DIMENSION = 2000  # pixels
MIN_DIMENSION = 16    # pixels
RENDER_DIMENSION = 512  # longest edge after downscaling

RING_COLOR = (30, 64, 175, 255)
RING_WIDTH = 2

LogoFetcher = Callable[[str], Awaitable[bytes]]


@dataclass(frozen=True)
class LogoImage:
    """Logo ready for embedding."""
    png_bytes: bytes
    width: int
    height: int
    source_url: Optional[str] = None

    def stream(self) -> io.BytesIO:
        """Fresh readable stream; exporters consume streams destructively."""
        return io.BytesIO(self.png_bytes)

    def scaled(self, edge: float) -> Tuple[float, float]:
        """Width and height with the longest side set to ``edge``."""
        longest = max(self.width, self.height)
        return edge * self.width / longest, edge * self.height / longest


def _open_image(content: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(content))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise LogoError(f"Invalid image file: {e}") from e
    return image


def _validate_dimensions(size: Tuple[int, int]) -> None:
    width, height = size
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise LogoError(f"Image too large. Maximum dimensions: {MAX_DIMENSION}x{MAX_DIMENSION}")
    if width < MIN_DIMENSION or height < MIN_DIMENSION:
        raise LogoError(f"Image too small. Minimum dimensions: {MIN_DIMENSION}x{MIN_DIMENSION}")


def _crop_circle(image: Image.Image) -> Image.Image:
    """Center-square crop, circular alpha mask and a thin outline ring."""
    size = min(image.size)
    left = (image.width - size) // 2
    top = (image.height - size) // 2
    square = image.crop((left, top, left + size, top + size))

    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, size - 1, size - 1), fill=255)

    result = Image.new("RGBA", (size, size), (255, 255, 255, 0))
    result.paste(square, (0, 0), mask)
    ImageDraw.Draw(result).ellipse(
        (0, 0, size - 1, size - 1), outline=RING_COLOR, width=RING_WIDTH
    )
    return result


def prepare_logo(
    content: bytes,
    circular: bool = True,
    max_bytes: int = MAX_FILE_SIZE,
    source_url: Optional[str] = None,
) -> LogoImage:
    """
    Validate raw image bytes and convert them to an embeddable PNG.

    Raises:
        LogoError: empty, oversized, undecodable or out-of-range image
    """
    if not content:
        raise LogoError("File is empty")
    if len(content) > max_bytes:
        raise LogoError(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB")

    image = _open_image(content)
    _validate_dimensions(image.size)

    image = image.convert("RGBA")
    image.thumbnail((RENDER_DIMENSION, RENDER_DIMENSION))
    if circular:
        image = _crop_circle(image)

    output = io.BytesIO()
    image.save(output, format="PNG")
    return LogoImage(
        png_bytes=output.getvalue(),
        width=image.width,
        height=image.height,
        source_url=source_url,
    )


class LogoLoader:
    """
    Fetches and prepares company logos, remembering them by URL.

    Usage:
        loader = LogoLoader(api_client.fetch_bytes)
        logo = await loader.load(company.logo)
    """

    def __init__(
        self,
        fetcher: LogoFetcher,
        circular: bool = True,
        max_bytes: int = MAX_FILE_SIZE,
    ):
        self._fetcher = fetcher
        self.circular = circular
        self.max_bytes = max_bytes
        self._cache: Dict[str, LogoImage] = {}

    async def load(self, url: str) -> LogoImage:
        """
        Return the prepared logo for ``url``.

        Raises:
            LogoError: when the logo cannot be downloaded or decoded
        """
        if not url:
            raise LogoError("No logo URL provided")

        cached = self._cache.get(url)
        if cached is not None:
            return cached

        try:
            content = await self._fetcher(url)
        except Exception as e:
            raise LogoError(f"Could not download logo from {url}: {e}") from e

        logo = prepare_logo(content, circular=self.circular, max_bytes=self.max_bytes, source_url=url)
        self._cache[url] = logo
        logger.info(f"Logo loaded from {url} ({logo.width}x{logo.height})")
        return logo

    def clear(self) -> None:
        self._cache.clear()
