"""
    Key and endpoints used to reach the Flickr API.

    The key is read from the FLICKR_API_KEY environment variable at
    import time and can be set later with 'set_keys':

    >>> import flickr_objects
    >>> flickr_objects.set_keys(api_key = "xxxx")
"""
import os

API_KEY = os.environ.get("FLICKR_API_KEY")

REST_URL = "https://api.flickr.com/services/rest/"
UPLOAD_URL = "https://up.flickr.com/services/upload/"

# seconds, handed to urlopen
TIMEOUT = 30

def set_keys(api_key):
    global API_KEY
    API_KEY = api_key
