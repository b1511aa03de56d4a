import unittest

from app.modules.svgs.sanitizer import sanitize_svg, SVGSanitizeError


class SanitizeSvgTests(unittest.TestCase):
    def test_keeps_drawing_elements_and_presentation_attributes(self):
        markup = sanitize_svg(
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">'
            '<defs><linearGradient id="g"><stop offset="0" stop-color="#fff"/></linearGradient></defs>'
            '<rect width="10" height="10" fill="url(#g)"/></svg>'
        )

        self.assertIn('viewBox="0 0 10 10"', markup)
        self.assertIn("linearGradient", markup)
        self.assertIn('fill="url(#g)"', markup)

    def test_removes_scripts_handlers_and_foreign_objects(self):
        markup = sanitize_svg(
            '<svg xmlns="http://www.w3.org/2000/svg" onload="x()">'
            '<script>alert(1)</script>'
            '<foreignObject><div xmlns="http://www.w3.org/1999/xhtml">hi</div></foreignObject>'
            '<circle r="1" onmouseover="y()"/></svg>'
        )

        self.assertNotIn("script", markup)
        self.assertNotIn("foreignObject", markup)
        self.assertNotIn("onload", markup)
        self.assertNotIn("onmouseover", markup)
        self.assertIn("circle", markup)

    def test_external_references_are_dropped(self):
        markup = sanitize_svg(
            '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">'
            '<use xlink:href="https://evil.example/x.svg#a"/>'
            '<use href="#local"/>'
            '<rect fill="url(https://evil.example/p.png)" style="background:url(javascript:alert(1))"/>'
            '<a href="javascript:alert(1)"><path d="M0 0"/></a></svg>'
        )

        self.assertNotIn("evil.example", markup)
        self.assertNotIn("javascript", markup)
        self.assertIn('href="#local"', markup)
        self.assertIn("path", markup)

    def test_unsafe_style_element_is_removed(self):
        markup = sanitize_svg(
            '<svg xmlns="http://www.w3.org/2000/svg"><style>@import url(https://evil.example/x.css);</style>'
            '<style>.a { fill: red; }</style></svg>'
        )

        self.assertNotIn("@import", markup)
        self.assertIn("fill: red", markup)

    def test_rejects_entities_and_non_svg_roots(self):
        with self.assertRaises(SVGSanitizeError):
            sanitize_svg('<!DOCTYPE svg [<!ENTITY x "boom">]><svg xmlns="http://www.w3.org/2000/svg">&x;</svg>')
        with self.assertRaises(SVGSanitizeError):
            sanitize_svg("<html><body/></html>")
        with self.assertRaises(SVGSanitizeError):
            sanitize_svg(b"not xml at all")

    def test_bytes_input(self):
        markup = sanitize_svg(b'<svg xmlns="http://www.w3.org/2000/svg"><title>Arrow</title></svg>')

        self.assertIn("<title>Arrow</title>", markup)
