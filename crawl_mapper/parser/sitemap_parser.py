"""crawl_mapper.parser.sitemap_parser: parse sitemap.xml and extract page URLs."""

from __future__ import annotations

from typing import List, Union

from lxml import etree


def parse_sitemap(xml_content: Union[str, bytes]) -> List[str]:
    """Parse a sitemap document and return the ``<url><loc>`` values in order.

    Args:
        xml_content: raw sitemap.xml content.

    Returns:
        List of page URLs, whitespace-trimmed, empty ``<loc>`` entries skipped.
        A document that is well formed but has no ``<urlset>`` entries
        (for example a sitemap index) yields an empty list.

    Raises:
        lxml.etree.XMLSyntaxError: the document is not well-formed XML.

    Example:
    ```python
    from crawl_mapper.parser.sitemap_parser import parse_sitemap

    with open('sitemap.xml', 'rb') as f:
        urls = parse_sitemap(f.read())
    ```
    """
    if isinstance(xml_content, str):
        xml_content = xml_content.encode("utf-8")
    parser = etree.XMLParser(ns_clean=True, recover=False, resolve_entities=False, no_network=True)
    root = etree.fromstring(xml_content, parser=parser)
    if etree.QName(root).localname != "urlset":
        return []
    locs = root.findall("{*}url/{*}loc")
    return [loc.text.strip() for loc in locs if loc.text and loc.text.strip()]
