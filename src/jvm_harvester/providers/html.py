from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup


@dataclass
class AnchorElement:
    href: str
    name: str


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def anchors_from_doc(document: BeautifulSoup, selector: str) -> list[AnchorElement]:
    """Collect anchors matching ``selector``; ``name`` starts out as the href."""

    anchors: list[AnchorElement] = []
    for element in document.select(selector):
        href = str(element.get("href") or "").strip()
        if not href:
            continue
        anchors.append(AnchorElement(href=href, name=href))
    return anchors


def href_suffix_selector(extensions: list[str]) -> str:
    return "a:is({})".format(", ".join(f"[href$='.{ext}']" for ext in extensions))


__all__ = [
    "AnchorElement",
    "anchors_from_doc",
    "href_suffix_selector",
    "parse_document",
]
