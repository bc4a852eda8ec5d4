import urllib.parse

import pytest

from flickr_objects import auth
from flickr_objects import keys
from flickr_objects import method_call


def rsp(inner="", stat="ok"):
    return ('<?xml version="1.0" encoding="utf-8" ?><rsp stat="%s">%s</rsp>' % (stat, inner)).encode("utf8")


def error_rsp(code, msg):
    return rsp('<err code="%i" msg="%s" />' % (code, msg), stat="fail")


class FakeTransport(object):
    """
    Answers REST calls from canned bodies keyed by method name and
    records every call. A response can be bytes, an exception to
    raise, or a callable taking the sent parameters.
    """

    def __init__(self):
        self.responses = {}
        self.calls = []
        self.uploads = []

    def add(self, method, response):
        self.responses["flickr." + method] = response

    def send(self, url, data=None, headers=None):
        if url == keys.UPLOAD_URL:
            self.uploads.append((data, headers))
            response = self.responses["upload"]
        else:
            params = dict(urllib.parse.parse_qsl(data.decode("utf8")))
            self.calls.append(params)
            response = self.responses[params["method"]]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params)
        return response

    def count(self, method):
        return len([c for c in self.calls if c["method"] == "flickr." + method])

    def last(self, method):
        return [c for c in self.calls if c["method"] == "flickr." + method][-1]


@pytest.fixture
def transport(monkeypatch):
    fake = FakeTransport()
    monkeypatch.setattr(method_call, "TRANSPORT", fake)
    monkeypatch.setattr(keys, "API_KEY", "test-key")
    monkeypatch.setattr(auth, "AUTH_HANDLER", None)
    return fake
