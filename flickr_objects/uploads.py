"""
    Photo uploads.

    >>> photo = upload("sunset.jpg",title = "Sunset",tags = ["sea","sun"])
    >>> photo.id
    '5341234567'
"""
import logging

from . import auth
from . import keys
from . import method_call
from .base import TransportError
from .multipart import FileParameter,MultipartBody,ValueParameter
from .objects import Photo
from .response import MISSING,resolve_value

logger = logging.getLogger(__name__)

def upload_parameters(source,token = None,**args):
    """
        Returns the list of parameters sent with an upload: the
        authentication and key parameters, 'args' sorted by name,
        then the file itself as 'photo'.
    """
    params = auth.authentication_options(token)
    if keys.API_KEY :
        params["api_key"] = keys.API_KEY
    params.update(args)
    values = [ ValueParameter(k,method_call.format_value(v))
               for k,v in sorted(params.items()) if v is not None ]
    return values + [FileParameter("photo",source)]

def upload(source,token = None,**args):
    """
        Uploads a photo.

    Arguments:
        source : path of the photo, or a multipart.FilePath / InlineBytes
        token : authentication token, defaults to auth.AUTH_HANDLER
        title, description, tags, is_public, is_friend, is_family,
        safety_level, content_type, hidden (optional)
            sent as given. Lists are joined with commas, and booleans
            become 0/1. Tags are space separated on Flickr's side.

    Returns the uploaded Photo, loaded on demand.
    """
    if isinstance(args.get("tags"),(list,tuple)):
        args["tags"] = " ".join(args["tags"])
    body = MultipartBody(upload_parameters(source,token,**args))
    logger.debug("Uploading %s",body.parameters[-1].filename)
    response = method_call.send(keys.UPLOAD_URL,body.to_bytes(),
                                {"Content-Type" : body.content_type}).check()
    photo_id = resolve_value(response.body,"photoid")
    if photo_id is MISSING :
        raise TransportError("Upload response without photoid")
    return Photo(id = photo_id.strip(),token = token)
