"""
Allow-list sanitizer for SVG markup that is rendered inline.

Only known SVG drawing elements and presentation attributes survive. Scripts,
event handlers, foreign objects, external references and DTDs are removed
or rejected.
"""

import re
import xml.etree.ElementTree as ET
from typing import Tuple, Union

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
XML_NS = "http://www.w3.org/XML/1998/namespace"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

ALLOWED_ELEMENTS = frozenset({
    "svg", "g", "defs", "symbol", "use", "title", "desc", "style",
    "path", "rect", "circle", "ellipse", "line", "polyline", "polygon",
    "text", "tspan", "textPath",
    "linearGradient", "radialGradient", "stop", "clipPath", "mask", "pattern", "marker",
    "filter", "feBlend", "feColorMatrix", "feComponentTransfer", "feComposite",
    "feConvolveMatrix", "feDiffuseLighting", "feDisplacementMap", "feDistantLight",
    "feDropShadow", "feFlood", "feFuncA", "feFuncB", "feFuncG", "feFuncR",
    "feGaussianBlur", "feMerge", "feMergeNode", "feMorphology", "feOffset",
    "fePointLight", "feSpecularLighting", "feSpotLight", "feTile", "feTurbulence",
})

ALLOWED_ATTRIBUTES = frozenset({
    # core and layout
    "id", "class", "style", "transform", "viewBox", "width", "height", "version",
    "preserveAspectRatio", "x", "y", "x1", "x2", "y1", "y2", "cx", "cy", "r", "rx", "ry",
    "d", "points", "pathLength", "lang", "space",
    # paint
    "fill", "fill-opacity", "fill-rule", "stroke", "stroke-width", "stroke-linecap",
    "stroke-linejoin", "stroke-miterlimit", "stroke-dasharray", "stroke-dashoffset",
    "stroke-opacity", "opacity", "color", "display", "visibility", "overflow",
    "clip-path", "clip-rule", "mask", "filter", "marker-start", "marker-mid", "marker-end",
    "vector-effect", "shape-rendering", "paint-order", "color-interpolation-filters",
    # text
    "font-family", "font-size", "font-weight", "font-style", "text-anchor",
    "dominant-baseline", "alignment-baseline", "letter-spacing", "word-spacing",
    "text-decoration", "dx", "dy", "rotate", "textLength", "lengthAdjust",
    "startOffset", "method", "spacing", "side",
    # gradients, patterns, clipping, markers
    "offset", "stop-color", "stop-opacity", "gradientUnits", "gradientTransform",
    "spreadMethod", "fx", "fy", "fr", "patternUnits", "patternContentUnits",
    "patternTransform", "clipPathUnits", "maskUnits", "maskContentUnits",
    "markerWidth", "markerHeight", "markerUnits", "refX", "refY", "orient",
    # filters
    "filterUnits", "primitiveUnits", "in", "in2", "result", "stdDeviation", "mode",
    "operator", "k1", "k2", "k3", "k4", "values", "type", "tableValues", "slope",
    "intercept", "amplitude", "exponent", "flood-color", "flood-opacity",
    "baseFrequency", "numOctaves", "seed", "stitchTiles", "scale",
    "xChannelSelector", "yChannelSelector", "radius", "kernelMatrix", "order",
    "divisor", "bias", "targetX", "targetY", "edgeMode", "kernelUnitLength",
    "preserveAlpha", "surfaceScale", "diffuseConstant", "specularConstant",
    "specularExponent", "lighting-color", "azimuth", "elevation", "z",
    "pointsAtX", "pointsAtY", "pointsAtZ", "limitingConeAngle",
})

_ALLOWED_NAMESPACES = ("", SVG_NS)
_ATTRIBUTE_NAMESPACES = ("", XLINK_NS, XML_NS)

# url(...) must point inside the document; no script URLs, CSS expressions or imports
_UNSAFE_VALUE = re.compile(
    r"javascript:|vbscript:|expression\s*\(|@import|url\(\s*(?!['\"]?\s*#)",
    re.IGNORECASE,
)
_DTD = re.compile(rb"<!\s*(DOCTYPE|ENTITY)", re.IGNORECASE)


class SVGSanitizeError(ValueError):
    pass


def _split(name: str) -> Tuple[str, str]:
    if name.startswith("{"):
        ns, local = name[1:].split("}", 1)
        return ns, local
    return "", name


def _clean_attributes(element: ET.Element) -> None:
    for name, value in list(element.attrib.items()):
        ns, local = _split(name)
        keep = ns in _ATTRIBUTE_NAMESPACES and not local.lower().startswith("on")
        if keep and local == "href":
            keep = value.strip().startswith("#")
        elif keep:
            keep = local in ALLOWED_ATTRIBUTES and not _UNSAFE_VALUE.search(value)
        if not keep:
            del element.attrib[name]


def _clean(element: ET.Element) -> None:
    for child in list(element):
        if not isinstance(child.tag, str):
            element.remove(child)
            continue
        ns, local = _split(child.tag)
        if ns in _ALLOWED_NAMESPACES and local == "a":
            # links become plain groups so their artwork survives
            child.tag = f"{{{ns}}}g" if ns else "g"
            local = "g"
        if ns not in _ALLOWED_NAMESPACES or local not in ALLOWED_ELEMENTS:
            element.remove(child)
            continue
        if local == "style" and child.text and _UNSAFE_VALUE.search(child.text):
            element.remove(child)
            continue
        _clean_attributes(child)
        _clean(child)


def sanitize_svg(markup: Union[str, bytes]) -> str:
    """Return safe-to-inline SVG markup. Raises SVGSanitizeError for non-SVG or DTD-bearing input."""
    data = markup.encode("utf-8") if isinstance(markup, str) else markup
    if _DTD.search(data):
        raise SVGSanitizeError("SVG documents with DTDs or entities are not allowed")
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise SVGSanitizeError(f"Invalid SVG markup: {e}")
    ns, local = _split(root.tag)
    if ns not in _ALLOWED_NAMESPACES or local != "svg":
        raise SVGSanitizeError("Root element must be <svg>")
    _clean_attributes(root)
    _clean(root)
    return ET.tostring(root, encoding="unicode")
