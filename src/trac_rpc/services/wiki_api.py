"""``wiki.*`` — wiki pages and their metadata."""

from __future__ import annotations

from datetime import datetime

from trac_rpc.domain.entities import Page, PageInfo
from trac_rpc.services.endpoint import Endpoint
from trac_rpc.services.record_decoder import decode_page_info, expect_int, expect_str


class WikiApi(Endpoint):
    def page(self, pagename: str) -> Page:
        """Return the latest version of a page: raw markup, HTML and info.

        Issues three calls; the first failure aborts the rest.
        """
        wiki = expect_str(self._call("wiki.getPage", pagename), "wiki.getPage")
        html = expect_str(self._call("wiki.getPageHTML", pagename), "wiki.getPageHTML")
        info = self.page_info(pagename)
        return Page(info=info, wiki=wiki, html=html)

    def page_info(self, pagename: str) -> PageInfo:
        return decode_page_info(self._call("wiki.getPageInfo", pagename))

    def rpc_version(self) -> int:
        """Return the WikiRPC API version the server supports."""
        return expect_int(
            self._call("wiki.getRPCVersionSupported"), "wiki.getRPCVersionSupported"
        )

    def pages(self) -> list[str]:
        return self._names("wiki.getAllPages")

    def page_version(self, pagename: str, version: int) -> str:
        self._unsupported("wiki.getPageVersion")

    def recent_changes(self, since: datetime) -> list[PageInfo]:
        self._unsupported("wiki.getRecentChanges")

    def page_info_version(self, pagename: str, version: int) -> PageInfo:
        self._unsupported("wiki.getPageInfoVersion")
