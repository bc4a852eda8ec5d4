"""
    Some base objects for the Flickr object mapper.

    Errors raised by the library, the converters applied to
    values read from Flickr responses and the list type returned
    by finders.
"""
import logging
from collections import UserList

logger = logging.getLogger(__name__)

class FlickrError(Exception):
    pass

class FlickrAPIError(FlickrError):
    """
        The remote side answered with an error payload
        (<rsp stat="fail"><err code=".." msg=".."/></rsp>).
    """
    def __init__(self,code,message):
        FlickrError.__init__(self,"%i : %s"%(code,message))
        self.code = code
        self.message = message

class NotFound(FlickrError):
    """
        A 'find_by_*' query resolved no node at its response path.
    """
    def __init__(self,cls_name,path,params = None):
        FlickrError.__init__(self,"No %s found at '%s'"%(cls_name,path))
        self.path = path
        self.params = params or {}

class Ambiguous(FlickrError):
    """
        A 'find_by_*' query resolved several nodes where one was expected.
    """
    def __init__(self,cls_name,path,count,params = None):
        FlickrError.__init__(self,"%i %s nodes found at '%s'"%(count,cls_name,path))
        self.path = path
        self.count = count
        self.params = params or {}

class TransportError(FlickrError):
    """
        Failure below the RPC layer: network error, bad HTTP status
        or a body that could not be parsed.
    """
    def __init__(self,message,status = None):
        FlickrError.__init__(self,message)
        self.status = status

class FileParameterError(FlickrError,IOError):
    """
        The data of a file parameter could not be read.
    """
    def __init__(self,filename,reason,errno = None):
        IOError.__init__(self,errno,reason,filename)
        self.reason = reason

def dict_converter(keys,func):
    """
        Converts the values of 'keys' with 'func'. A value that fails
        to convert is dropped, leaving the attribute unset.
    """
    def convert(dict_) :
        for k in keys :
            try :
                dict_[k] = func(dict_[k])
            except KeyError : pass
            except (TypeError,ValueError) :
                logger.debug("Dropping unconvertible value %r for '%s'",dict_.pop(k),k)
    return convert

class FlickrList(UserList):
    """
        List of objects returned by a 'find_all_*' finder. 'info'
        holds the attributes of the container node (page, pages,
        total, ...) when the response has them.
    """
    def __init__(self,data = (),info = None):
        UserList.__init__(self,data)
        self.info = info or {}

    def __str__(self):
        return '%s;%s'%(str(self.data),str(self.info))

    def __repr__(self):
        return '%s;%s'%(repr(self.data),repr(self.info))
