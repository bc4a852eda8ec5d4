import urllib.error

import pytest

from flickr_objects import auth, keys, method_call
from flickr_objects.base import Ambiguous, FlickrAPIError, FlickrList, NotFound, TransportError
from flickr_objects.objects import UNLOADED, Person, Photo, Photoset

from .conftest import error_rsp, rsp

PHOTOSET_INFO = rsp(
    '<photoset id="72157" owner="123@N00" primary="2483" secret="abc" server="1" photos="12">'
    "<title>Holidays</title><description>Summer</description>"
    "</photoset>"
)

PHOTOSET_LIST = rsp(
    '<photosets page="1" pages="1" perpage="500" total="2">'
    '<photoset id="1" primary="11" photos="3"><title>First</title></photoset>'
    '<photoset id="2" primary="22" photos="4"><title>Second</title></photoset>'
    "</photosets>"
)


def test_find_one(transport):
    transport.add("photosets.getInfo", PHOTOSET_INFO)
    photoset = Photoset.find_by_id("72157")
    assert isinstance(photoset, Photoset)
    assert photoset.id == "72157"
    assert photoset.title == "Holidays"
    assert photoset.count == 12
    assert photoset.user_id == "123@N00"
    params = transport.last("photosets.getInfo")
    assert params["photoset_id"] == "72157"
    assert params["api_key"] == "test-key"
    assert "auth_token" not in params


def test_find_one_sends_options_and_token(transport):
    transport.add("photosets.getInfo", PHOTOSET_INFO)
    photoset = Photoset.find_by_id("72157", token="tok", extras=["a", "b"])
    params = transport.last("photosets.getInfo")
    assert params["auth_token"] == "tok"
    assert params["extras"] == "a,b"
    assert photoset.getToken() == "tok"


def test_find_one_uses_default_token(transport, monkeypatch):
    monkeypatch.setattr(auth, "AUTH_HANDLER", "default-token")
    transport.add("people.getInfo", rsp('<person id="1@N0" nsid="1@N0"><username>bob</username></person>'))
    person = Person.find_by_id("1@N0")
    assert person.username == "bob"
    assert transport.last("people.getInfo")["auth_token"] == "default-token"


def test_find_one_not_found(transport):
    transport.add("photosets.getInfo", rsp())
    with pytest.raises(NotFound) as excinfo:
        Photoset.find_by_id("72157")
    assert excinfo.value.path == "photoset"
    assert excinfo.value.params["photoset_id"] == "72157"


def test_find_one_ambiguous(transport):
    transport.add("photosets.getInfo", rsp('<photoset id="1" /><photoset id="2" />'))
    with pytest.raises(Ambiguous) as excinfo:
        Photoset.find_by_id("1")
    assert not isinstance(excinfo.value, NotFound)
    assert excinfo.value.count == 2
    assert excinfo.value.path == "photoset"
    assert excinfo.value.params["photoset_id"] == "1"


def test_lazy_load_on_ambiguous_response(transport):
    transport.add("photosets.getInfo", rsp('<photoset id="1" owner="a" /><photoset id="2" owner="b" />'))
    photoset = Photoset(id="1")
    with pytest.raises(Ambiguous):
        photoset.user_id
    assert photoset.load_state("load_info") == UNLOADED
    assert "user_id" not in photoset.__dict__


def test_find_one_with_unconvertible_value(transport):
    transport.add("photosets.getInfo", rsp('<photoset id="1" photos=""><title>T</title></photoset>'))
    photoset = Photoset.find_by_id("1")
    assert photoset.title == "T"
    assert photoset.count is None
    assert "count" not in photoset.__dict__


def test_find_one_remote_error_is_not_not_found(transport):
    transport.add("photosets.getInfo", error_rsp(1, "Photoset not found"))
    with pytest.raises(FlickrAPIError) as excinfo:
        Photoset.find_by_id("72157")
    assert not isinstance(excinfo.value, NotFound)
    assert excinfo.value.code == 1


def test_find_one_transport_error(transport):
    transport.add("photosets.getInfo", TransportError("boom"))
    with pytest.raises(TransportError):
        Photoset.find_by_id("72157")


def test_find_all_in_order(transport):
    transport.add("photosets.getList", PHOTOSET_LIST)
    photosets = Photoset.find_all_by_user_id("123@N00")
    assert isinstance(photosets, FlickrList)
    assert [p.id for p in photosets] == ["1", "2"]
    assert [p.title for p in photosets] == ["First", "Second"]
    assert photosets.info["total"] == 2
    assert transport.last("photosets.getList")["user_id"] == "123@N00"


def test_find_all_empty(transport):
    transport.add("photosets.getList", rsp('<photosets page="1" pages="0" total="0" />'))
    photosets = Photoset.find_all_by_user_id("123@N00")
    assert photosets == []
    assert isinstance(photosets, FlickrList)


def test_find_all_on_response_without_nodes(transport):
    transport.add("photosets.getList", rsp())
    transport.add("photosets.getInfo", rsp())
    assert Photoset.find_all_by_user_id("123@N00") == []
    with pytest.raises(NotFound):
        Photoset.find_by_id("1")


def test_find_all_remote_error(transport):
    transport.add("photosets.getPhotos", error_rsp(1, "Photoset not found"))
    with pytest.raises(FlickrAPIError):
        Photo.find_all_by_photoset_id("1")


def test_find_by_username(transport):
    transport.add("people.findByUsername", rsp('<user id="12@N01" nsid="12@N01"><username>Stewart</username></user>'))
    person = Person.find_by_username("Stewart")
    assert person.id == "12@N01"
    assert person.username == "Stewart"


def test_call_api_keeps_error_payload(transport):
    transport.add("photosets.delete", error_rsp(2, "Not owner"))
    response = method_call.call_api("photosets.delete", photoset_id="1")
    assert response.error.code == 2


def test_call_api_strict_raises(transport):
    transport.add("photosets.delete", error_rsp(2, "Not owner"))
    with pytest.raises(FlickrAPIError):
        method_call.call_api_strict("photosets.delete", photoset_id="1")


def test_build_params():
    params = method_call.build_params("photos.search", auth_handler="tok", tags=["a", "b"], is_public=True, page=None)
    assert params["method"] == "flickr.photos.search"
    assert params["tags"] == "a,b"
    assert params["is_public"] == "1"
    assert params["auth_token"] == "tok"
    assert "page" not in params
    assert method_call.build_params("flickr.test.echo")["method"] == "flickr.test.echo"


def test_create_is_strict(transport):
    transport.add("photosets.create", error_rsp(3, "No title specified"))
    transport.add("photosets.getInfo", PHOTOSET_INFO)
    with pytest.raises(FlickrAPIError):
        Photoset.create(title="", primary_photo_id="2483")
    assert transport.count("photosets.getInfo") == 0


def test_create(transport):
    transport.add("photosets.create", rsp('<photoset id="72157" url="https://www.flickr.com/photos/bees/sets/72157/" />'))
    transport.add("photosets.getInfo", PHOTOSET_INFO)
    photoset = Photoset.create(title="Holidays", primary_photo=Photo(id="2483"), token="tok")
    assert photoset.id == "72157"
    assert photoset.title == "Holidays"
    assert photoset.getToken() == "tok"
    sent = transport.last("photosets.create")
    assert sent["primary_photo_id"] == "2483"
    assert sent["auth_token"] == "tok"
    assert transport.last("photosets.getInfo")["photoset_id"] == "72157"


def test_add_photo(transport):
    transport.add("photosets.addPhoto", rsp())
    photoset = Photoset(id="72157", token="tok")
    photoset.add_photo(photo=Photo(id="5"))
    sent = transport.last("photosets.addPhoto")
    assert sent["photo_id"] == "5"
    assert sent["photoset_id"] == "72157"
    assert sent["auth_token"] == "tok"


def test_add_photo_is_strict(transport):
    transport.add("photosets.addPhoto", error_rsp(3, "Photo already in set"))
    with pytest.raises(FlickrAPIError):
        Photoset(id="72157").add_photo(photo_id="5")


def test_urllib_transport_wraps_url_errors(monkeypatch):
    def urlopen(request, timeout=None):
        raise urllib.error.URLError("no route")

    monkeypatch.setattr(method_call.urllib.request, "urlopen", urlopen)
    with pytest.raises(TransportError) as excinfo:
        method_call.UrllibTransport().send("https://api.example.com/", b"")
    assert excinfo.value.status is None


def test_urllib_transport_wraps_http_errors(monkeypatch):
    def urlopen(request, timeout=None):
        raise urllib.error.HTTPError(request.full_url, 503, "Unavailable", {}, None)

    monkeypatch.setattr(method_call.urllib.request, "urlopen", urlopen)
    with pytest.raises(TransportError) as excinfo:
        method_call.UrllibTransport().send("https://api.example.com/", b"")
    assert excinfo.value.status == 503


def test_set_keys(transport, monkeypatch):
    monkeypatch.setattr(keys, "API_KEY", None)
    keys.set_keys("other-key")
    assert not hasattr(keys, "API_SECRET")
    transport.add("photosets.getInfo", PHOTOSET_INFO)
    Photoset.find_by_id("72157")
    assert transport.last("photosets.getInfo")["api_key"] == "other-key"
