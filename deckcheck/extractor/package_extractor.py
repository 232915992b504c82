"""Package Extractor — builds the normalized slide model from .pptx bytes.

Unpacks the zip container, selects the slide parts by the
``ppt/slides/slide<N>.xml`` naming convention, orders them by ``N`` and
walks each part's element tree for text runs, pictures, shapes and the
background.  The lowest-numbered theme part supplies scheme colors and the
major/minor typefaces.

Failure policy:
    - Unreadable container or no slide parts -> ``PackageError`` (fatal)
    - Malformed slide XML -> slide skipped, warning recorded
    - Malformed theme XML -> theme omitted, warning recorded
"""

from __future__ import annotations

import io
import logging
import posixpath
import re
import zipfile
import zlib
from pathlib import Path

from lxml import etree
from pptx.oxml.ns import qn

from deckcheck.errors import PackageError, SlidePartError, ThemeParseError
from deckcheck.extractor.xml_tree import (
    color_token,
    find_elements,
    find_first,
    is_true,
    parse_relationships,
    parse_xml,
)
from deckcheck.schema.models import (
    Background,
    ImageRef,
    ParsedPresentation,
    ShapeRef,
    SlideContent,
    TextRun,
    Theme,
)

logger = logging.getLogger(__name__)

_SLIDE_PART_RE = re.compile(r"^ppt/slides/slide[^/]*\.xml$")
_SLIDE_INDEX_RE = re.compile(r"slide(\d+)\.xml$")
_THEME_PART_RE = re.compile(r"^ppt/theme/theme(\d*)\.xml$")

# Run font size is stored in hundredths of a point
_SIZE_UNITS_PER_PT = 100


def _slide_index(part_name: str) -> int:
    """Numeric index embedded in a slide part name, or 0."""
    m = _SLIDE_INDEX_RE.search(part_name)
    return int(m.group(1)) if m else 0


def _rels_part_for(part_name: str) -> str:
    """Relationship part name for a part, e.g. ppt/slides/_rels/slide1.xml.rels."""
    directory, filename = posixpath.split(part_name)
    return posixpath.join(directory, "_rels", f"{filename}.rels")


def _resolve_target(part_name: str, target: str) -> str:
    """Resolve a relative relationship target against the source part."""
    if target.startswith("/"):
        return target.lstrip("/")
    base = posixpath.dirname(part_name)
    return posixpath.normpath(posixpath.join(base, target))


# ---------------------------------------------------------------------------
# Run / shape readers
# ---------------------------------------------------------------------------

def _font_size(rpr: etree._Element | None) -> float | None:
    raw = rpr.get("sz") if rpr is not None else None
    if not raw:
        return None
    try:
        return int(raw) / _SIZE_UNITS_PER_PT
    except ValueError:
        return None


def _font_family(rpr: etree._Element | None) -> str | None:
    if rpr is None:
        return None
    latin = rpr.find(qn("a:latin"))
    if latin is None:
        return None
    return latin.get("typeface") or None


def _run_color(rpr: etree._Element | None) -> str | None:
    if rpr is None:
        return None
    return color_token(rpr.find(qn("a:solidFill")))


def _read_run(run: etree._Element) -> TextRun | None:
    """Build a TextRun from an ``a:r`` element, or None if it has no text."""
    t = run.find(qn("a:t"))
    text = t.text if t is not None else None
    if not text:
        return None
    rpr = run.find(qn("a:rPr"))
    return TextRun(
        content=text,
        font_size=_font_size(rpr),
        font_family=_font_family(rpr),
        color=_run_color(rpr),
        is_bold=is_true(rpr.get("b")) if rpr is not None else False,
        is_italic=is_true(rpr.get("i")) if rpr is not None else False,
    )


def _shape_type(shape: etree._Element) -> str:
    """Preset geometry, else placeholder type, else "shape"."""
    geom = find_first(shape, qn("a:prstGeom"))
    if geom is not None and geom.get("prst"):
        return geom.get("prst")
    ph = find_first(shape, qn("p:ph"))
    if ph is not None:
        return ph.get("type", "placeholder")
    return "shape"


def _shape_text(shape: etree._Element) -> str | None:
    parts = [t.text for t in shape.iter(qn("a:t")) if t.text]
    return " ".join(parts) or None


# ---------------------------------------------------------------------------
# PackageExtractor
# ---------------------------------------------------------------------------

class PackageExtractor:
    """Extracts a ParsedPresentation from raw .pptx bytes.

    Parameters
    ----------
    data : bytes
        The raw package content.
    """

    def __init__(self, data: bytes) -> None:
        self.data = data
        self._warnings: list[str] = []

    def extract(self) -> ParsedPresentation:
        """Unpack the package and build the slide model."""
        self._warnings = []
        try:
            archive = zipfile.ZipFile(io.BytesIO(self.data))
        except (zipfile.BadZipFile, TypeError, ValueError) as e:
            raise PackageError(
                "invalid container", cause=e,
                context={"expected": "zip container (.pptx)"},
            ) from e

        with archive:
            names = archive.namelist()
            slide_parts = sorted(
                (n for n in names if _SLIDE_PART_RE.match(n)),
                key=_slide_index,
            )
            if not slide_parts:
                raise PackageError(
                    "no slides",
                    context={"expected": "ppt/slides/slide<N>.xml",
                             "parts": len(names)},
                )

            slides: list[SlideContent] = []
            for part_name in slide_parts:
                try:
                    slide = self._parse_slide(archive, part_name, len(slides) + 1)
                except SlidePartError as e:
                    msg = f"Skipped {part_name}: {e.message}"
                    logger.warning(msg)
                    self._warnings.append(msg)
                    continue
                slides.append(slide)

            theme = self._parse_theme(archive, names)

        logger.debug("Extracted %d slide(s) from %d part(s)",
                     len(slides), len(slide_parts))
        return ParsedPresentation(slides=slides, theme=theme,
                                  warnings=list(self._warnings))

    # ------------------------------------------------------------------
    # Part access
    # ------------------------------------------------------------------

    @staticmethod
    def _read_xml(archive: zipfile.ZipFile, part_name: str,
                  error_cls: type) -> etree._Element:
        """Read and parse a part, raising ``error_cls`` on any failure."""
        try:
            return parse_xml(archive.read(part_name))
        except etree.XMLSyntaxError as e:
            raise error_cls("malformed XML", cause=e,
                            context={"part": part_name}) from e
        except (zipfile.BadZipFile, zlib.error, KeyError, OSError,
                RuntimeError, NotImplementedError) as e:
            raise error_cls("unreadable part", cause=e,
                            context={"part": part_name}) from e

    def _relationships(self, archive: zipfile.ZipFile,
                       part_name: str) -> dict[str, tuple[str, bool]]:
        """Relationships of a part; an unreadable .rels part yields none."""
        rels_name = _rels_part_for(part_name)
        try:
            return parse_relationships(archive.read(rels_name))
        except KeyError:
            return {}
        except (etree.XMLSyntaxError, zipfile.BadZipFile, zlib.error,
                RuntimeError, NotImplementedError) as e:
            logger.debug("Ignoring relationships of %s: %s", part_name, e)
            return {}

    # ------------------------------------------------------------------
    # Slides
    # ------------------------------------------------------------------

    def _parse_slide(self, archive: zipfile.ZipFile, part_name: str,
                     slide_number: int) -> SlideContent:
        root = self._read_xml(archive, part_name, SlidePartError)
        rels = self._relationships(archive, part_name)

        slide = SlideContent(slide_number=slide_number, part_name=part_name)
        shapes = find_elements(root, qn("p:sp"))

        # Text pass
        for shape in shapes:
            for body in find_elements(shape, qn("p:txBody")):
                for paragraph in find_elements(body, qn("a:p")):
                    for run in find_elements(paragraph, qn("a:r")):
                        text_run = _read_run(run)
                        if text_run is not None:
                            slide.texts.append(text_run)

        # Shape pass
        for shape in shapes:
            slide.shapes.append(ShapeRef(type=_shape_type(shape),
                                         text=_shape_text(shape)))

        # Image pass
        for i, pic in enumerate(find_elements(root, qn("p:pic")), start=1):
            slide.images.append(self._image_ref(pic, i, part_name, rels))

        slide.background = self._background(root)
        return slide

    @staticmethod
    def _image_ref(pic: etree._Element, position: int, part_name: str,
                   rels: dict[str, tuple[str, bool]]) -> ImageRef:
        c_nv_pr = find_first(pic, qn("p:cNvPr"))
        name = c_nv_pr.get("name") if c_nv_pr is not None else None

        target = None
        blip = find_first(pic, qn("a:blip"))
        rid = None
        if blip is not None:
            rid = blip.get(qn("r:embed")) or blip.get(qn("r:link"))
        if rid and rid in rels:
            ref, external = rels[rid]
            target = ref if external else _resolve_target(part_name, ref)

        ext = posixpath.splitext(target)[1].lstrip(".").lower() if target else ""
        return ImageRef(name=name or f"image{position}", type=ext or "image",
                        target=target)

    @staticmethod
    def _background(root: etree._Element) -> Background | None:
        bg = find_first(root, qn("p:bg"))
        if bg is None:
            return None

        bg_pr = bg.find(qn("p:bgPr"))
        if bg_pr is not None:
            solid = bg_pr.find(qn("a:solidFill"))
            if solid is not None:
                return Background(type="solid", color=color_token(solid))
            blip_fill = bg_pr.find(qn("a:blipFill"))
            if blip_fill is not None:
                blip = blip_fill.find(qn("a:blip"))
                image = blip.get(qn("r:embed")) if blip is not None else None
                return Background(type="image", image=image)
            if bg_pr.find(qn("a:gradFill")) is not None:
                return Background(type="gradient")

        bg_ref = bg.find(qn("p:bgRef"))
        if bg_ref is not None:
            return Background(type="ref", color=color_token(bg_ref))
        return None

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    def _parse_theme(self, archive: zipfile.ZipFile,
                     names: list[str]) -> Theme | None:
        theme_parts = sorted(
            (n for n in names if _THEME_PART_RE.match(n)),
            key=lambda n: int(_THEME_PART_RE.match(n).group(1) or 0),
        )
        if not theme_parts:
            return None

        part_name = theme_parts[0]
        try:
            root = self._read_xml(archive, part_name, ThemeParseError)
        except ThemeParseError as e:
            msg = f"Theme omitted ({part_name}): {e.message}"
            logger.warning(msg)
            self._warnings.append(msg)
            return None

        theme = Theme()
        clr_scheme = find_first(root, qn("a:clrScheme"))
        if clr_scheme is not None:
            for slot in clr_scheme:
                value = color_token(slot)
                if value:
                    theme.colors.append(value)

        font_scheme = find_first(root, qn("a:fontScheme"))
        if font_scheme is not None:
            for tag in ("a:majorFont", "a:minorFont"):
                font = font_scheme.find(qn(tag))
                latin = font.find(qn("a:latin")) if font is not None else None
                if latin is not None and latin.get("typeface"):
                    theme.fonts.append(latin.get("typeface"))

        return theme


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------

def extract_presentation(data: bytes) -> ParsedPresentation:
    """Convenience function: extract a ParsedPresentation from package bytes."""
    return PackageExtractor(data).extract()


def extract_from_file(path: str | Path) -> ParsedPresentation:
    """Extract a ParsedPresentation from a .pptx file on disk."""
    return extract_presentation(Path(path).read_bytes())
