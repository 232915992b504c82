"""Generic element-tree helpers for schema-free OOXML parts.

Slide XML varies by producer, so extraction never relies on fixed paths.
Everything goes through ``find_elements``, a depth-first search by tag that
tolerates missing intermediate levels (a paragraph without runs, a run
without properties, a shape nested inside a group).
"""

from lxml import etree
from pptx.oxml.ns import qn

# Package relationships namespace (not part of the DrawingML prefixes)
REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

# Color choice elements whose source token is kept verbatim
_COLOR_ATTRS = {
    qn("a:srgbClr"): ("val",),
    qn("a:schemeClr"): ("val",),
    qn("a:prstClr"): ("val",),
    qn("a:sysClr"): ("lastClr", "val"),
}

_TRUE_VALUES = {"1", "true", "on"}


def parse_xml(data: bytes) -> etree._Element:
    """Parse a part's bytes into an element tree.

    Raises ``etree.XMLSyntaxError`` for malformed input. Entity resolution
    and network access are disabled.
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True,
                             remove_comments=True)
    return etree.fromstring(data, parser)


def find_elements(node: etree._Element, tag: str) -> list[etree._Element]:
    """Depth-first search for descendants of ``node`` with the given tag.

    ``tag`` is a Clark-notation name (use ``qn("p:sp")``). Matching
    elements are collected in document order and not searched further.
    """
    results: list[etree._Element] = []

    def search(current):
        for child in current:
            if child.tag == tag:
                results.append(child)
            else:
                search(child)

    search(node)
    return results


def find_first(node: etree._Element, tag: str) -> etree._Element | None:
    """Return the first descendant with ``tag``, or None."""
    found = find_elements(node, tag)
    return found[0] if found else None


def color_token(fill: etree._Element | None) -> str | None:
    """Read the color token from a fill element (e.g. ``a:solidFill``).

    Returns the value exactly as written in the source: a hex code for
    ``srgbClr``, the scheme slot for ``schemeClr``, the preset name for
    ``prstClr``, the last computed color for ``sysClr``.
    """
    if fill is None:
        return None
    for child in fill:
        attrs = _COLOR_ATTRS.get(child.tag)
        if attrs is None:
            continue
        for attr in attrs:
            value = child.get(attr)
            if value:
                return value
    return None


def is_true(value: str | None) -> bool:
    """Interpret an xsd:boolean attribute value."""
    return value is not None and value.strip().lower() in _TRUE_VALUES


def parse_relationships(data: bytes) -> dict[str, tuple[str, bool]]:
    """Map relationship ids to ``(target, is_external)`` from a .rels part."""
    root = parse_xml(data)
    rels: dict[str, tuple[str, bool]] = {}
    for rel in root.iter(f"{{{REL_NS}}}Relationship"):
        rid = rel.get("Id")
        target = rel.get("Target")
        if rid and target:
            rels[rid] = (target, rel.get("TargetMode") == "External")
    return rels
