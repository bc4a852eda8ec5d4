"""
    Declarations describing how a FlickrObject is read from Flickr
    responses, and the metaclass turning them into a schema.

    A class lists its declarations in class attributes:

        class Photoset(FlickrObject):
            __attributes__ = [
                Attribute("id"),
                Attribute("count",path = "@photos",converter = int),
                Attribute("user_id",path = "@owner",lazy = "load_info"),
            ]
            __associations__ = [
                HasMany("photos","Photo",finder = "find_all_by_photoset_id"),
            ]
            __finders__ = [
                FindOne("by_id",using = "photoset_id",
                        call = "photosets.getInfo",path = "photoset"),
            ]

    FlickrMeta collects them once, at class creation, into an
    immutable Schema stored as '__schema__', and adds one class
    method per finder ('find_by_id', 'find_all_by_user_id', ...)
    and one method per remote association ('photos').
"""
import logging
import types

from . import method_call
from .base import Ambiguous,NotFound

logger = logging.getLogger(__name__)

# "module.qualname" -> class, filled by FlickrMeta
REGISTRY = {}

def registry_key(cls):
    return "%s.%s"%(cls.__module__,cls.__qualname__)

class Attribute(object):
    """
        An attribute read from a response node.

        path : path of the value, relative to the object node. A tuple
            gives alternatives tried in order. Defaults to the
            attribute node '@<name>' then the child element '<name>'.
        lazy : name of the method loading this attribute when it is
            read before being set.
        converter : callable applied to the text found.
    """
    def __init__(self,name,path = None,lazy = None,converter = None):
        self.name = name
        if path is None :
            path = ("@" + name,name)
        elif isinstance(path,str):
            path = (path,)
        self.paths = tuple(path)
        self.lazy = lazy
        self.converter = converter

    def __repr__(self):
        return "Attribute(%r, path=%r)"%(self.name,self.paths)

class HasMany(object):
    """
        A one to many relation.

        With 'path', the elements are read from the nodes found at
        'path' under the object node. With 'finder', they are fetched
        by calling the finder of 'element_type' with the object id.
        'element_type' is a class or its qualified name, looked up in the
        module of the declaring class unless it is a full
        'module.qualname'.
    """
    def __init__(self,name,element_type,path = None,finder = None):
        if (path is None) == (finder is None):
            raise TypeError("HasMany '%s' needs exactly one of 'path' or 'finder'"%name)
        self.name = name
        self._element_type = element_type
        self.path = path
        self.finder = finder
        self.owner_module = None

    @property
    def element_type(self):
        if not isinstance(self._element_type,str):
            return self._element_type
        if self.owner_module is not None :
            try :
                return REGISTRY["%s.%s"%(self.owner_module,self._element_type)]
            except KeyError : pass
        return REGISTRY[self._element_type]

    def __repr__(self):
        return "HasMany(%r, %r)"%(self.name,self._element_type)

class FindOne(object):
    """
        Binds 'find_<name>' to the remote method 'call'. The value given
        to the finder is sent as the 'using' argument and the object is
        read from the node at 'path'.
    """
    cardinality = "one"

    def __init__(self,name,call,path,using = None):
        self.name = name
        self.call = call
        self.path = path
        self.using = using or _key_from_name(name)

    @property
    def method_name(self):
        return "find_" + self.name

    @property
    def key(self):
        return self.using

class FindAll(object):
    """
        Binds 'find_all_<name>' to the remote method 'call'. Every node
        at 'path' gives one object.
    """
    cardinality = "many"

    def __init__(self,name,call,path,by = None):
        self.name = name
        self.call = call
        self.path = path
        self.by = by or _key_from_name(name)

    @property
    def method_name(self):
        return "find_all_" + self.name

    @property
    def key(self):
        return self.by

def _key_from_name(name):
    if name.startswith("by_"):
        return name[3:]
    return name

class Schema(object):
    def __init__(self,attributes,associations,finders):
        self.attributes = tuple(attributes)
        self.associations = tuple(associations)
        self.finders = tuple(finders)
        self.attribute_names = frozenset(a.name for a in self.attributes)
        self.lazy = types.MappingProxyType(
            dict((a.name,a.lazy) for a in self.attributes if a.lazy))
        self.by_association = types.MappingProxyType(
            dict((a.name,a) for a in self.associations))

def _merge(inherited,declared):
    names = set(d.name for d in declared)
    return [ d for d in inherited if d.name not in names ] + list(declared)

def _make_docstring(finder,cls_name):
    if finder.cardinality == "one" :
        doc = """
        Returns the %(cls)s found at '%(path)s'.

        flickr method: flickr.%(call)s

        Arguments:
            %(key)s (required)
            token (optional): token given to the returned object
            any other argument is sent with the call

        Raises NotFound when the response holds no such node and
        Ambiguous when it holds several.
    """
    else :
        doc = """
        Returns the list of %(cls)s found at '%(path)s'.

        flickr method: flickr.%(call)s

        Arguments:
            %(key)s (required)
            token (optional): token given to the returned objects
            any other argument is sent with the call
    """
    return doc%{'cls':cls_name,'path':finder.path,'call':finder.call,'key':finder.key}

def _call(finder,value,options):
    token = options.pop("token",None)
    if token is None :
        token = options.get("auth_token")
    args = dict(options)
    args[finder.key] = value
    response = method_call.call_api(finder.call,auth_handler = token,**args)
    response.check()
    return response,token,args

def single_node(response,path,cls_name,params):
    """
        Returns the only node at 'path', raising NotFound when there is
        none and Ambiguous when there are several.
    """
    nodes = response.find_all(path)
    if not nodes :
        raise NotFound(cls_name,path,params)
    if len(nodes) > 1 :
        raise Ambiguous(cls_name,path,len(nodes),params)
    return nodes[0]

def make_finder(finder):
    if finder.cardinality == "one" :
        def find(cls,value,**options):
            response,token,args = _call(finder,value,options)
            node = single_node(response,finder.path,cls.__name__,args)
            return cls.from_node(node,token = token)
    else :
        def find(cls,value,**options):
            response,token,args = _call(finder,value,options)
            return cls.list_from_response(response,finder.path,token = token)
    find.__name__ = finder.method_name
    find.flickr_method = finder.call
    return find

def make_association(assoc):
    def fetch(self,**options):
        def fetch_elements(merged):
            finder = getattr(assoc.element_type,assoc.finder)
            return finder(self.id,**merged)
        return self.with_caching(options,assoc.name,fetch_elements)
    fetch.__name__ = assoc.name
    fetch.__doc__ = """
        Returns the %s of this object (cached per option set).
    """%assoc.name
    return fetch

class FlickrMeta(type):
    """
        Meta class building the schema of FlickrObject classes.
    """
    def __new__(meta,classname,bases,classDict):
        cls = type.__new__(meta,classname,bases,classDict)
        inherited = getattr(cls,"__schema__",None)
        if inherited is None :
            inherited = Schema((),(),())
        schema = Schema(
            _merge(inherited.attributes,classDict.get("__attributes__",())),
            _merge(inherited.associations,classDict.get("__associations__",())),
            _merge(inherited.finders,classDict.get("__finders__",())),
        )
        cls.__schema__ = schema

        for finder in classDict.get("__finders__",()) :
            if finder.method_name in classDict :
                continue
            find = make_finder(finder)
            find.__doc__ = _make_docstring(finder,classname)
            setattr(cls,finder.method_name,classmethod(find))

        for assoc in classDict.get("__associations__",()) :
            if assoc.owner_module is None :
                assoc.owner_module = cls.__module__
            if assoc.finder is None or assoc.name in classDict :
                continue
            setattr(cls,assoc.name,make_association(assoc))

        for name,loader in schema.lazy.items() :
            if not callable(getattr(cls,loader,None)):
                raise TypeError("%s.%s is lazily loaded with '%s', which is not a method"%(classname,name,loader))

        REGISTRY[registry_key(cls)] = cls
        logger.debug("Declared %s with attributes %s",registry_key(cls),sorted(schema.attribute_names))
        return cls
