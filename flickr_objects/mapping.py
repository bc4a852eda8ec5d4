"""
    Reading FlickrObject values out of response nodes.

    Missing values are never an error: an attribute whose paths
    resolve nothing is simply left out, so populating an object
    twice only overwrites what the second node holds.
"""
import logging

from .base import FlickrList
from .response import MISSING,find_nodes,resolve_value

logger = logging.getLogger(__name__)

def attribute_values(cls,node):
    """
        Returns the dictionnary of the attributes of 'cls' found in 'node',
        after conversion.
    """
    values = {}
    for attr in cls.__schema__.attributes :
        for path in attr.paths :
            value = resolve_value(node,path)
            if value is not MISSING :
                break
        else :
            continue
        if attr.converter is not None :
            try :
                value = attr.converter(value)
            except (TypeError,ValueError) :
                logger.debug("%s.%s: cannot convert %r, left unset",cls.__name__,attr.name,value)
                continue
        values[attr.name] = value
    for c in cls.__converters__ :
        c(values)
    return values

def association_values(cls,node,token = None,current = None):
    """
        Returns the associations of 'cls' read from nested nodes.
        Associations without matching node are only given (as empty
        lists) when 'current' does not hold them yet.
    """
    current = current or {}
    values = {}
    for assoc in cls.__schema__.associations :
        if assoc.path is None :
            continue
        nodes = find_nodes(node,assoc.path)
        if not nodes and assoc.name in current :
            continue
        element_type = assoc.element_type
        values[assoc.name] = FlickrList([ build(element_type,n,token) for n in nodes ])
    return values

def populate(obj,node):
    cls = obj.__class__
    values = attribute_values(cls,node)
    values.update(association_values(cls,node,obj.getToken(),obj.__dict__))
    logger.debug("Populating %s with %s",cls.__name__,sorted(values))
    obj.__dict__.update(values)
    return obj

def build(cls,node,token = None):
    return populate(cls(token = token),node)

def info_values(node):
    """ Attributes of a list container node (page, pages, total, ...). """
    info = dict(node.attrib)
    for k in ("page","pages","perpage","per_page","total") :
        try :
            info[k] = int(info[k])
        except (KeyError,ValueError) : pass
    return info
