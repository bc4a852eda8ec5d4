"""
    Object mapping for the Flickr API.

    Domain objects are declared with Attribute, HasMany, FindOne and
    FindAll (see flickr_objects.declarations) and read from the XML
    responses of the REST API:

    >>> import flickr_objects
    >>> flickr_objects.set_keys(api_key = "xxxx")
    >>> photoset = flickr_objects.Photoset.find_by_id("72157624")
    >>> photoset.title
    >>> photoset.photos()
"""
from .auth import set_auth_handler
from .base import (Ambiguous,FileParameterError,FlickrAPIError,FlickrError,
                   FlickrList,NotFound,TransportError)
from .declarations import Attribute,FindAll,FindOne,HasMany
from .keys import set_keys
from .multipart import (FileParameter,FilePath,InlineBytes,MultipartBody,
                        ValueParameter)
from .objects import FlickrObject,Person,Photo,Photoset,Tag,Walker
from .uploads import upload
