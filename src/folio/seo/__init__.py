"""Sitemap, robots.txt, structured data and SEO reporting."""

from folio.seo.emitter import SeoPackage, build_sitemap_urls, render_sitemap_xml, write_seo_package
from folio.seo.report import build_seo_report

__all__ = [
    "SeoPackage",
    "build_sitemap_urls",
    "render_sitemap_xml",
    "write_seo_package",
    "build_seo_report",
]
