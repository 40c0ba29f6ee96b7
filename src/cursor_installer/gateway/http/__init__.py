"""HTTP access to the vendor API and download server."""

from cursor_installer.gateway.http.abc import HttpClient as HttpClient
from cursor_installer.gateway.http.fake import FakeHttpClient as FakeHttpClient
from cursor_installer.gateway.http.real import RealHttpClient as RealHttpClient
