from __future__ import annotations

import asyncio

import pytest
from aiohttp import ClientSession, web
from lxml import etree

from crawl_mapper.crawler.sitemap import SitemapFetcher
from crawl_mapper.exceptions import SitemapUnavailable
from crawl_mapper.parser.sitemap_parser import parse_sitemap

SITEMAP_XML = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url>
    <loc>https://www.example.com/page1</loc>
    <lastmod>2023-01-01</lastmod>
  </url>
  <url>
    <loc>
      https://www.example.com/page2
    </loc>
  </url>
  <url><loc></loc></url>
  <url>
    <loc>https://www.example.com/page3</loc>
  </url>
</urlset>"""

SITEMAP_INDEX_XML = """<?xml version="1.0" encoding="UTF-8"?>
<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <sitemap><loc>https://www.example.com/sitemap-pages.xml</loc></sitemap>
</sitemapindex>"""

EXPECTED = [
    "https://www.example.com/page1",
    "https://www.example.com/page2",
    "https://www.example.com/page3",
]


def test_parse_sitemap_keeps_declaration_order():
    assert parse_sitemap(SITEMAP_XML) == EXPECTED


def test_parse_sitemap_without_namespace():
    xml = "<urlset><url><loc>/a</loc></url><url><loc>/a</loc></url></urlset>"
    assert parse_sitemap(xml.encode()) == ["/a", "/a"]


def test_parse_sitemap_index_has_no_pages():
    assert parse_sitemap(SITEMAP_INDEX_XML) == []


def test_parse_invalid_xml():
    with pytest.raises(etree.XMLSyntaxError):
        parse_sitemap("<urlset><url><loc>broken")


def make_app() -> web.Application:
    app = web.Application()

    async def sitemap(_):
        return web.Response(text=SITEMAP_XML, content_type="application/xml")

    async def broken(_):
        return web.Response(text="<html>not a sitemap", content_type="text/html")

    async def forbidden(_):
        return web.Response(status=403)

    async def slow(_):
        await asyncio.sleep(3)
        return web.Response(text=SITEMAP_XML, content_type="application/xml")

    app.router.add_get("/sitemap.xml", sitemap)
    app.router.add_get("/broken.xml", broken)
    app.router.add_get("/forbidden.xml", forbidden)
    app.router.add_get("/slow.xml", slow)
    return app


@pytest.mark.asyncio()
async def test_fetch_urls(serve_app):
    async with serve_app(make_app()) as base, ClientSession() as session:
        urls = await SitemapFetcher(session, timeout=2.0).fetch_urls(f"{base}/sitemap.xml")
    assert urls == EXPECTED


@pytest.mark.asyncio()
@pytest.mark.parametrize("path,status", [("/missing.xml", 404), ("/forbidden.xml", 403)])
async def test_http_errors_raise_sitemap_unavailable(serve_app, path, status):
    async with serve_app(make_app()) as base, ClientSession() as session:
        with pytest.raises(SitemapUnavailable) as info:
            await SitemapFetcher(session, timeout=2.0).fetch_urls(f"{base}{path}")
    assert info.value.status == status
    assert info.value.url == f"{base}{path}"
    assert "Sitemap not found" in str(info.value)


@pytest.mark.asyncio()
async def test_invalid_xml_raises_sitemap_unavailable(serve_app):
    async with serve_app(make_app()) as base, ClientSession() as session:
        with pytest.raises(SitemapUnavailable) as info:
            await SitemapFetcher(session, timeout=2.0).fetch_urls(f"{base}/broken.xml")
    assert info.value.status is None


@pytest.mark.asyncio()
async def test_timeout_raises_sitemap_unavailable(serve_app):
    async with serve_app(make_app()) as base, ClientSession() as session:
        with pytest.raises(SitemapUnavailable):
            await SitemapFetcher(session, timeout=0.3).fetch_urls(f"{base}/slow.xml")


@pytest.mark.asyncio()
async def test_unreachable_host_raises_sitemap_unavailable(unused_tcp_port):
    async with ClientSession() as session:
        with pytest.raises(SitemapUnavailable):
            await SitemapFetcher(session, timeout=1.0).fetch_urls(
                f"http://127.0.0.1:{unused_tcp_port}/sitemap.xml"
            )


@pytest.mark.asyncio()
async def test_oversized_sitemap_raises_sitemap_unavailable(serve_app):
    async with serve_app(make_app()) as base, ClientSession() as session:
        with pytest.raises(SitemapUnavailable) as info:
            await SitemapFetcher(session, timeout=2.0, max_bytes=50).fetch_urls(f"{base}/sitemap.xml")
    assert "larger than 50 bytes" in str(info.value)
    assert info.value.status is None
