"""Helpers for working with rendered HTML as a BeautifulSoup tree."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag


def parse_fragment(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def create_container(html: str = "", css_class: str = "markdown-body") -> Tag:
    """Return a detached ``<div>`` holding ``html``, for callers without a document."""
    soup = BeautifulSoup("", "html.parser")
    container = soup.new_tag("div", attrs={"class": css_class})
    soup.append(container)
    if html:
        insert_html(container, html)
    return container


def insert_html(container: Tag, html: str) -> Tag:
    """Replace the contents of ``container`` with the parsed ``html``."""
    container.clear()
    container.append(parse_fragment(html))
    return container


def inner_html(container: Tag) -> str:
    return container.decode_contents()
