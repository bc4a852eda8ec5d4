"""
    Calls to the Flickr REST API.

    'call_api' sends a method call and returns the parsed Response,
    error payload included. 'call_api_strict' raises FlickrAPIError
    as soon as the response carries an error; it is used for calls
    that modify data on Flickr.

    The HTTP exchange goes through the module level TRANSPORT object,
    which only needs a 'send(url,data,headers)' method returning the
    raw body.
"""
import logging
import urllib.error
import urllib.parse
import urllib.request

from . import auth
from . import keys
from .base import TransportError
from .response import Response

logger = logging.getLogger(__name__)

class UrllibTransport(object):
    def send(self,url,data = None,headers = None):
        request = urllib.request.Request(url,data = data,headers = headers or {})
        try :
            with urllib.request.urlopen(request,timeout = keys.TIMEOUT) as r :
                return r.read()
        except urllib.error.HTTPError as e :
            raise TransportError("HTTP error %i on %s"%(e.code,url),status = e.code)
        except OSError as e :
            # URLError, timeouts and socket errors
            raise TransportError("Cannot reach %s: %s"%(url,e))

TRANSPORT = UrllibTransport()

def format_value(value):
    if isinstance(value,bool):
        return "1" if value else "0"
    if isinstance(value,(list,tuple)):
        return ",".join(format_value(v) for v in value)
    return str(value)

def build_params(method,auth_handler = None,**args):
    """
        Returns the parameter dictionnary sent for 'method'.
        The 'flickr.' prefix is added when missing.
    """
    if not method.startswith("flickr.") :
        method = "flickr." + method
    params = auth.authentication_options(auth_handler)
    params.update(args)
    params["method"] = method
    if keys.API_KEY :
        params.setdefault("api_key",keys.API_KEY)
    return dict((k,format_value(v)) for k,v in params.items() if v is not None)

def send(url,data,headers = None):
    return Response(TRANSPORT.send(url,data,headers))

def call_api(method,auth_handler = None,**args):
    params = build_params(method,auth_handler,**args)
    logger.debug("Calling %s with %s",params["method"],
                 sorted(k for k in params if k not in ("api_key","auth_token")))
    data = urllib.parse.urlencode(params).encode("utf8")
    response = send(keys.REST_URL,data,
                    {"Content-Type" : "application/x-www-form-urlencoded"})
    if not response.ok() :
        logger.debug("%s answered with error %s",params["method"],response.error)
    return response

def call_api_strict(method,auth_handler = None,**args):
    return call_api(method,auth_handler,**args).check()
