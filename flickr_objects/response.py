"""
    Parsed Flickr responses and path lookups on them.

    Paths are relative to a node and use the ElementTree path
    syntax, with two additions for reading values:
        '@name' or 'child/@name' : an attribute node
        '.'                      : the text of the node itself
"""
import logging
from xml.etree import ElementTree

from .base import FlickrAPIError,TransportError

logger = logging.getLogger(__name__)

class _Missing(object):
    def __bool__(self):
        return False
    def __repr__(self):
        return "MISSING"

MISSING = _Missing()

def find_node(node,path):
    if path in (None,"","."):
        return node
    return node.find(path)

def find_nodes(node,path):
    return node.findall(path)

def resolve_value(node,path):
    """
        Returns the value found at 'path' from 'node' or MISSING.
        Element paths yield the element text ('' for an empty element).
    """
    if path == "." :
        return node.text or ""
    head,_,last = path.rpartition("/")
    if last.startswith("@") :
        attr = last[1:]
        parent = find_node(node,head)
        if parent is None :
            return MISSING
        return parent.get(attr,MISSING)
    child = node.find(path)
    if child is None :
        return MISSING
    return child.text or ""

class Response(object):
    """
        Wraps the '<rsp>' envelope returned by the REST endpoint.

        A failed call is kept as a response carrying 'error', so that
        the caller decides when to raise it (see 'check').
    """
    def __init__(self,content):
        try :
            self.body = ElementTree.fromstring(content)
        except ElementTree.ParseError as e :
            raise TransportError("Unparsable response: %s"%e)
        if self.body.tag != "rsp" :
            raise TransportError("Unexpected root element '%s'"%self.body.tag)
        self.stat = self.body.get("stat")
        self.error = None
        if self.stat != "ok" :
            err = self.body.find("err")
            if err is None :
                code,message = 0,"Unknown error (stat=%s)"%self.stat
            else :
                try :
                    code = int(err.get("code",0))
                except ValueError :
                    code = 0
                message = err.get("msg","")
            self.error = FlickrAPIError(code,message)

    def ok(self):
        return self.error is None

    def check(self):
        if self.error is not None :
            logger.warning("Flickr error %s",self.error)
            raise self.error
        return self

    def find_one(self,path):
        return find_node(self.body,path)

    def find_all(self,path):
        return find_nodes(self.body,path)
