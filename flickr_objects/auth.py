"""
    Authentication options merged into every outgoing call.

    Obtaining and signing tokens is left to the caller: a token is
    an opaque string sent as 'auth_token'. A default token can be
    installed with 'set_auth_handler', and every FlickrObject can
    carry its own (see FlickrObject.setToken).
"""

AUTH_HANDLER = None

def set_auth_handler(token):
    global AUTH_HANDLER
    AUTH_HANDLER = token

def authentication_options(token = None):
    """
        Returns the option dictionnary for 'token', falling back
        to the default token.
    """
    if token is None :
        token = AUTH_HANDLER
    if not token :
        return {}
    return {"auth_token" : token}
