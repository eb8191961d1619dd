import re
import uuid
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union
from contextlib import contextmanager

import fitz  # PyMuPDF
from PIL import Image, ImageOps

from ..core.validation import PageRasterizationError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9_-]+')


@dataclass(frozen=True)
class RenderOptions:
    """How a page is rasterized for OCR."""
    density: int = 200
    width: int = 1200
    height: int = 1600
    fmt: str = "png"


class PageRasterizer:
    """
    Renders single PDF pages to image files in a shared temporary directory.

    Every image gets a unique name built from the document stem, a random
    token and the page number, so concurrent comparisons never collide.
    Use ``rendered_page`` so the image is removed once the page is done.
    """

    def __init__(
        self,
        options: Optional[RenderOptions] = None,
        temp_dir: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize PageRasterizer.

        Args:
            options: Density, target size and format of rendered pages
            temp_dir: Directory for page images (None = system temp directory)
        """
        self.options = options or RenderOptions()
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir()) / "docsim_pages"

    def _image_path(self, document: Union[str, Path], page_number: int) -> Path:
        stem = _UNSAFE_CHARS.sub("_", Path(document).stem)[:40] or "document"
        return self.temp_dir / f"{stem}_{uuid.uuid4().hex[:12]}_p{page_number}.{self.options.fmt}"

    def render_page(self, document: Union[str, Path], page_number: int) -> Path:
        """
        Render one page (1-indexed) to an image file.

        The page is rendered at ``options.density`` DPI and scaled to fit
        ``options.width`` x ``options.height`` keeping its aspect ratio.

        Returns:
            Path of the written image; the caller owns and deletes it

        Raises:
            PageRasterizationError: If the page cannot be rendered or saved
        """
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        image_path = self._image_path(document, page_number)

        try:
            with fitz.open(Path(document), filetype="pdf") as doc:
                if not 1 <= page_number <= doc.page_count:
                    raise PageRasterizationError(
                        f"Page {page_number} out of range (document has {doc.page_count} pages)",
                        page_number=page_number,
                    )
                pix = doc.load_page(page_number - 1).get_pixmap(dpi=self.options.density, alpha=False)

            img = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
            img = ImageOps.contain(img, (self.options.width, self.options.height))
            img.save(image_path)
        except PageRasterizationError:
            raise
        except Exception as e:
            image_path.unlink(missing_ok=True)
            raise PageRasterizationError(
                f"Failed to render page {page_number} of {Path(document).name}: {e}",
                page_number=page_number,
            ) from e

        logger.debug(f"Rendered page {page_number} to {image_path.name} ({img.width}x{img.height})")
        return image_path

    @contextmanager
    def rendered_page(self, document: Union[str, Path], page_number: int) -> Iterator[Path]:
        """
        Render a page and delete its image when the block exits.

        Cleanup runs whether the block succeeds or raises.
        """
        image_path = self.render_page(document, page_number)
        try:
            yield image_path
        finally:
            image_path.unlink(missing_ok=True)
            logger.debug(f"Removed page image {image_path.name}")
