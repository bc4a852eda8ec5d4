"""
    Object Oriented mapping of Flickr responses.

    Important notes:
    - Objects are read-only. Their attributes are set from responses
      (see FlickrObject.populate_from) or by the constructor.

    - Attributes declared 'lazy' are loaded on first read with the
      method named in the declaration. A failed load leaves the
      object unloaded: the error is raised and the next read tries
      again.

    - Methods taking options ('user', 'primary_photo', 'photos',...)
      cache their result per set of options, merged with the
      authentication options of the object.
"""
import collections.abc
import logging
import threading

from . import auth
from . import mapping
from . import method_call
from .base import FlickrError,FlickrList,NotFound,dict_converter
from .declarations import Attribute,FindAll,FindOne,FlickrMeta,HasMany,single_node

logger = logging.getLogger(__name__)

UNLOADED = "unloaded"
LOADING = "loading"
LOADED = "loaded"

class FlickrObject(object,metaclass = FlickrMeta):
    """
        Base Object for Flickr API Objects
    """
    __converters__ = []
    __display__ = []

    def __init__(self,token = None,**params):
        d = self.__dict__
        d["_lock"] = threading.RLock()
        d["_load_states"] = {}
        d["_cache"] = {}
        d["token"] = token
        self._set_properties(**params)

    def _set_properties(self,**params):
        for c in self.__class__.__converters__ :
            c(params)
        self.__dict__.update(params)

    @classmethod
    def from_node(cls,node,token = None):
        return mapping.build(cls,node,token)

    @classmethod
    def list_from_response(cls,response,path,token = None):
        nodes = response.find_all(path)
        container = response.find_one(path.rpartition("/")[0]) if "/" in path else None
        info = mapping.info_values(container) if container is not None else None
        return FlickrList([ cls.from_node(n,token) for n in nodes ],info)

    def populate_from(self,node):
        with self._lock :
            return mapping.populate(self,node)

    def setToken(self,token):
        self.__dict__["token"] = token

    def getToken(self):
        return self.__dict__.get("token",None)

    def authentication_options(self,options = None):
        opts = auth.authentication_options(self.getToken())
        if options :
            opts.update(options)
        return opts

    def __getattr__(self,name):
        if name.startswith("_") :
            raise AttributeError(name)
        schema = self.__class__.__schema__
        loader = schema.lazy.get(name)
        if loader is not None :
            self._lazy_load(loader)
            return self.__dict__.get(name)
        if name in schema.attribute_names :
            return None
        if name in schema.by_association :
            return self.__dict__.setdefault(name,FlickrList())
        raise AttributeError("'%s' object has no attribute '%s'"%(self.__class__.__name__,name))

    def __setattr__(self,name,values):
        raise FlickrError("Readonly attribute")

    def get(self,key,*args,**kwargs):
        return self.__dict__.get(key,*args,**kwargs)

    def __getitem__(self,key):
        return self.__dict__[key]

    def __setitem__(self,key,value):
        raise FlickrError("Read-only attribute")

    def __str__(self):
        vals = []
        for k in self.__class__.__display__ :
            try :
                value = self.__dict__[k]
            except KeyError :
                continue
            if isinstance(value,str):
                value = "'%s'"%value
            else : value = str(value)
            if len(value) > 20: value = value[:20]+"..."
            vals.append("%s = %s"%(k,value))
        return "%s(%s)"%(self.__class__.__name__,", ".join(vals))

    def __repr__(self): return str(self)

    def load_state(self,loader):
        return self._load_states.get(loader,UNLOADED)

    def _lazy_load(self,loader):
        with self._lock :
            # LOADING here means the loader itself reads a lazy attribute
            if self.load_state(loader) != UNLOADED :
                return
            self._load_states[loader] = LOADING
            logger.debug("Lazy loading %s with %s",self,loader)
            try :
                getattr(self,loader)()
            except BaseException :
                self._load_states[loader] = UNLOADED
                raise
            self._load_states[loader] = LOADED

    def _load(self,method,path,**args):
        """
            Calls 'method' and populates this object from the node at 'path'.
        """
        response = method_call.call_api_strict(method,**self.authentication_options(args))
        node = single_node(response,path,self.__class__.__name__,args)
        return self.populate_from(node)

    def with_caching(self,options,key,fetch):
        """
            Returns the result of 'fetch(merged_options)' for 'key'. 'fetch'
            runs once per distinct set of merged options, later calls
            with the same options return the stored result.
        """
        merged = self.authentication_options(options)
        entry = (key,cache_key(merged))
        with self._lock :
            try :
                result = self._cache[entry]
            except KeyError :
                logger.debug("Cache miss for %s.%s",self.__class__.__name__,key)
            else :
                return result
            result = fetch(merged)
            self._cache[entry] = result
            return result

    def clear_cache(self,key = None):
        with self._lock :
            if key is None :
                self._cache.clear()
            else :
                for entry in [ e for e in self._cache if e[0] == key ] :
                    del self._cache[entry]

def cache_key(value):
    """
        Canonical, hashable form of 'value' used in cache keys.

        Mappings are compared regardless of order, FlickrObjects by
        class and id, scalars by type and value. Anything else is
        compared by repr, which only hits when the repr is stable.
    """
    if isinstance(value,FlickrObject):
        return ("object",value.__class__.__qualname__,value.get("id"))
    if isinstance(value,collections.abc.Mapping):
        return ("mapping",tuple(sorted((str(k),cache_key(v)) for k,v in value.items())))
    if isinstance(value,(list,tuple)):
        return ("sequence",tuple(cache_key(v) for v in value))
    if isinstance(value,(set,frozenset)):
        return ("set",tuple(sorted((cache_key(v) for v in value),key = repr)))
    if value is None or isinstance(value,(str,bytes,int,float)):
        return (type(value).__name__,value)
    return ("repr",repr(value))

def _format_id(name,args):
    try: args[name+"_id"] = args.pop(name).id
    except KeyError : pass

class Person(FlickrObject):
    __display__ = ["id","username"]
    __attributes__ = [
        Attribute("id",path = ("@nsid","@id")),
        Attribute("username"),
        Attribute("realname"),
        Attribute("location"),
        Attribute("photos_url",path = "photosurl"),
    ]
    __finders__ = [
        FindOne("by_id",using = "user_id",call = "people.getInfo",path = "person"),
        FindOne("by_username",using = "username",call = "people.findByUsername",path = "user"),
    ]

class Tag(FlickrObject):
    __display__ = ["id","raw"]
    __attributes__ = [
        Attribute("id"),
        Attribute("author_id",path = "@author"),
        Attribute("raw"),
        Attribute("text",path = "."),
    ]

class Photo(FlickrObject):
    __display__ = ["id","title"]
    __converters__ = [
        dict_converter(["farm"],int),
    ]
    __attributes__ = [
        Attribute("id"),
        Attribute("title"),
        Attribute("secret"),
        Attribute("server"),
        Attribute("farm"),
        Attribute("description",lazy = "load_info"),
        Attribute("owner_id",path = ("owner/@nsid","@owner"),lazy = "load_info"),
    ]
    __associations__ = [
        HasMany("tags",Tag,path = "tags/tag"),
    ]
    __finders__ = [
        FindOne("by_id",using = "photo_id",call = "photos.getInfo",path = "photo"),
        FindAll("by_photoset_id",call = "photosets.getPhotos",path = "photoset/photo"),
    ]

    def load_info(self):
        self._load("photos.getInfo","photo",photo_id = self.id)

    def owner(self,**options):
        return self.with_caching(options,"owner",
                                 lambda opts : Person.find_by_id(self.owner_id,**opts))

class Photoset(FlickrObject):
    """
        A set of photos.

        Attributes:
            id, title, description, count
            primary_photo_id : id of the photo representing the set
            user_id : id of the owner, loaded with 'load_info' if missing

        Associations:
            photos() : Photo list, see Photo.find_all_by_photoset_id
            comments() : Photoset.Comment list
    """
    __display__ = ["id","title"]

    class Comment(FlickrObject):
        __display__ = ["id","author_name"]
        __attributes__ = [
            Attribute("id"),
            Attribute("author_id",path = "@author"),
            Attribute("author_name",path = "@authorname"),
            Attribute("date_create",path = "@datecreate",converter = int),
            Attribute("body",path = "."),
        ]
        __finders__ = [
            FindAll("by_photoset_id",call = "photosets.comments.getList",path = "comments/comment"),
        ]

    __attributes__ = [
        Attribute("id"),
        Attribute("title"),
        Attribute("description"),
        Attribute("primary_photo_id",path = "@primary"),
        Attribute("count",path = "@photos",converter = int),
        Attribute("user_id",path = "@owner",lazy = "load_info"),
    ]
    __associations__ = [
        HasMany("photos","Photo",finder = "find_all_by_photoset_id"),
        HasMany("comments","Photoset.Comment",finder = "find_all_by_photoset_id"),
    ]
    __finders__ = [
        FindAll("by_user_id",call = "photosets.getList",path = "photosets/photoset"),
        FindOne("by_id",using = "photoset_id",call = "photosets.getInfo",path = "photoset"),
    ]

    @property
    def url(self):
        return "https://www.flickr.com/photos/%s/sets/%s/"%(self.user_id,self.id)

    def primary_photo(self,**options):
        """ Primary photo for this set. """
        return self.with_caching(options,"primary_photo",
                                 lambda opts : Photo.find_by_id(self.primary_photo_id,**opts))

    def user(self,**options):
        """ The user who created this set. """
        return self.with_caching(options,"user",
                                 lambda opts : Person.find_by_id(self.user_id,**opts))

    def load_info(self):
        self._load("photosets.getInfo","photoset",photoset_id = self.id)

    @staticmethod
    def create(**args):
        """ method: flickr.photosets.create
            Create a new photoset for the calling user.

        Arguments:
            title (Required)
                A title for the photoset.
            description (Optional)
                A description of the photoset. May contain limited html.
            primary_photo or primary_photo_id (Required)
                The photo or id of the photo to represent this set.
            token (Optional)
                Token used for the call and given to the new set.
        """
        token = args.pop("token",None)
        _format_id("primary_photo",args)
        r = method_call.call_api_strict("photosets.create",auth_handler = token,**args)
        node = r.find_one("photoset")
        if node is None :
            raise NotFound("Photoset","photoset",args)
        photoset = Photoset.from_node(node,token = token)
        return Photoset.find_by_id(photoset.id,token = token)

    def add_photo(self,**args):
        """ method: flickr.photosets.addPhoto
            Add a photo to the end of the photoset.

        Arguments:
            photo or photo_id (Required)
        """
        _format_id("photo",args)
        args["photoset_id"] = self.id
        r = method_call.call_api_strict("photosets.addPhoto",**self.authentication_options(args))
        self.clear_cache("photos")
        return r

class Walker(object):
    """
        Object to walk along paginated results. This allows
        to loop on all the results corresponding to a query
        regardless pagination.

        w = Walker(method,*args,**kwargs)

        arguments:
        - method: a 'find_all_*' finder, returning a FlickrList
        - *args: positional arguments to call 'method' with
        - **kwargs: named arguments to call 'method' with

        ex:
        >>> w = Walker(Photo.find_all_by_photoset_id,"72157",per_page = 100)
        >>> for photo in w :
        >>>     print(photo.title)
    """
    def __init__(self,method,*args,**kwargs):
        self.method = method
        self.args = args
        self.kwargs = kwargs

        self._curr_list = self.method(*self.args,**self.kwargs)
        self._info = self._curr_list.info
        self._curr_index = 0
        self._page = self._info.get("page",1)

    def __len__(self):
        return self._info.get("total",len(self._curr_list))

    def __iter__(self):
        return self

    def __next__(self):
        while self._curr_index == len(self._curr_list) :
            if self._page >= self._info.get("pages",1) :
                raise StopIteration()
            self._page += 1
            self.kwargs["page"] = self._page
            self._curr_list = self.method(*self.args,**self.kwargs)
            self._info = self._curr_list.info
            self._curr_index = 0

        curr = self._curr_list[self._curr_index]
        self._curr_index += 1
        return curr
