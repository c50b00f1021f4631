"""SVG element builders shared by every chart renderer.

Plain string assembly. Every text node and attribute value that can carry
user data goes through _esc().
"""

import html as _html


def _esc(text) -> str:
    """HTML-escape a string (None renders as empty)."""
    return _html.escape(str(text)) if text is not None else ""


def fmt_num(value) -> str:
    """Format a coordinate: integers stay bare, floats get two decimals."""
    if isinstance(value, int):
        return str(value)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def svg_open(width, height, cls: str = "", label: str = "", state: str = "") -> str:
    """Open an SVG tag with viewBox for fluid scaling."""
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {fmt_num(width)} {fmt_num(height)}"'
        f' width="{fmt_num(width)}" height="{fmt_num(height)}"'
    ]
    if cls:
        parts.append(f' class="{_esc(cls)}"')
    if state:
        parts.append(f' data-state="{_esc(state)}"')
    if label:
        parts.append(f' role="img" aria-label="{_esc(label)}"')
    parts.append(">")
    return "".join(parts)


def svg_close() -> str:
    return "</svg>"


def svg_title(text) -> str:
    """Native tooltip for the enclosing element."""
    return f"<title>{_esc(text)}</title>"


def svg_rect(x, y, w, h, fill="", stroke="", stroke_width=0, rx=0, cls="", extra="") -> str:
    parts = [f'<rect x="{fmt_num(x)}" y="{fmt_num(y)}" width="{fmt_num(w)}" height="{fmt_num(h)}"']
    if rx:
        parts.append(f' rx="{fmt_num(rx)}"')
    if fill:
        parts.append(f' fill="{fill}"')
    if stroke:
        parts.append(f' stroke="{stroke}" stroke-width="{fmt_num(stroke_width)}"')
    if cls:
        parts.append(f' class="{cls}"')
    if extra:
        parts.append(f" {extra}")
    parts.append("/>")
    return "".join(parts)


def svg_text(x, y, text, font_size=12, fill="", anchor="start",
             weight="", cls="", extra="") -> str:
    parts = [f'<text x="{fmt_num(x)}" y="{fmt_num(y)}" font-size="{font_size}"']
    if fill:
        parts.append(f' fill="{fill}"')
    if anchor != "start":
        parts.append(f' text-anchor="{anchor}"')
    if weight:
        parts.append(f' font-weight="{weight}"')
    if cls:
        parts.append(f' class="{cls}"')
    if extra:
        parts.append(f" {extra}")
    parts.append(f">{_esc(text)}</text>")
    return "".join(parts)


def svg_line(x1, y1, x2, y2, stroke="", stroke_width=1, cls="", extra="") -> str:
    parts = [f'<line x1="{fmt_num(x1)}" y1="{fmt_num(y1)}" x2="{fmt_num(x2)}" y2="{fmt_num(y2)}"']
    if stroke:
        parts.append(f' stroke="{stroke}"')
    parts.append(f' stroke-width="{fmt_num(stroke_width)}"')
    if cls:
        parts.append(f' class="{cls}"')
    if extra:
        parts.append(f" {extra}")
    parts.append("/>")
    return "".join(parts)


def svg_path(d: str, stroke="", stroke_width=2, fill="none", cls="", extra="") -> str:
    parts = [f'<path d="{d}"']
    if stroke:
        parts.append(f' stroke="{stroke}" stroke-width="{fmt_num(stroke_width)}"')
    parts.append(f' fill="{fill}"')
    if cls:
        parts.append(f' class="{cls}"')
    if extra:
        parts.append(f" {extra}")
    parts.append("/>")
    return "".join(parts)


def svg_polygon(points, fill="none", stroke="", stroke_width=1, cls="") -> str:
    pts = " ".join(f"{fmt_num(x)},{fmt_num(y)}" for x, y in points)
    parts = [f'<polygon points="{pts}" fill="{fill}"']
    if stroke:
        parts.append(f' stroke="{stroke}" stroke-width="{fmt_num(stroke_width)}"')
    if cls:
        parts.append(f' class="{cls}"')
    parts.append("/>")
    return "".join(parts)


def svg_circle(cx, cy, r, fill="", stroke="", stroke_width=1, cls="", inner="") -> str:
    """Circle; ``inner`` (e.g. a <title>) is nested inside the element."""
    parts = [f'<circle cx="{fmt_num(cx)}" cy="{fmt_num(cy)}" r="{fmt_num(r)}"']
    if fill:
        parts.append(f' fill="{fill}"')
    if stroke:
        parts.append(f' stroke="{stroke}" stroke-width="{fmt_num(stroke_width)}"')
    if cls:
        parts.append(f' class="{cls}"')
    if inner:
        parts.append(f">{inner}</circle>")
    else:
        parts.append("/>")
    return "".join(parts)


def svg_group(inner: str, cls: str = "", extra: str = "") -> str:
    c = f' class="{cls}"' if cls else ""
    e = f" {extra}" if extra else ""
    return f"<g{c}{e}>{inner}</g>"
