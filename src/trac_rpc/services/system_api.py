"""``system.*`` — introspection of the RPC server itself."""

from __future__ import annotations

from trac_rpc.domain.entities import APIVersion
from trac_rpc.services.endpoint import Endpoint
from trac_rpc.services.record_decoder import decode_api_version, expect_str


class SystemApi(Endpoint):
    def api_version(self) -> APIVersion:
        """Return the ``[epoch, major, minor]`` version of the remote API."""
        return decode_api_version(self._call("system.getAPIVersion"))

    def methods(self) -> list[str]:
        """Return one name for each (non-system) method the server supports."""
        return self._names("system.listMethods")

    def method_help(self, method: str) -> str:
        """Return the documentation string for ``method``.

        The string may contain HTML markup and is empty when the server has
        no documentation for it.
        """
        return expect_str(self._call("system.methodHelp", method), "system.methodHelp")

    def method_signature(self, method: str) -> list[str]:
        self._unsupported("system.methodSignature")
