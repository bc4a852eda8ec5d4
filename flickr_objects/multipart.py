"""
    multipart/form-data encoding of upload parameters.

    FileParameter and ValueParameter render one part each with
    'to_form'; MultipartBody adds the boundary framing and gives
    the Content-Type header of the request.
"""
import io
import os
import threading
import uuid

from PIL import Image

from .base import FileParameterError

MIME_TYPES = {
    '.jpg' : 'image/jpeg',
    '.png' : 'image/png',
    '.gif' : 'image/gif',
}

CRLF = b"\r\n"

def _quote(value):
    """
        Value of a quoted Content-Disposition parameter.
    """
    value = str(value)
    if "\r" in value or "\n" in value :
        raise ValueError("Line break in multipart header value %r"%value)
    return value.replace('"',"%22")

def _to_bytes(value):
    if isinstance(value,bytes):
        return value
    return str(value).encode("utf8")

class FilePath(object):
    """ File data read from the filesystem. """
    def __init__(self,path):
        self.path = os.fspath(path)

    @property
    def filename(self):
        return self.path

    def read(self):
        try :
            with open(self.path,"rb") as f :
                return f.read()
        except OSError as e :
            raise FileParameterError(self.path,e.strerror or str(e),e.errno)

    def __repr__(self):
        return "FilePath(%r)"%self.path

class InlineBytes(object):
    """
        File data already held in memory. 'filename' is only used
        for the Content-Disposition header and the MIME type.
    """
    def __init__(self,data,filename):
        if not isinstance(data,bytes):
            raise TypeError("InlineBytes expects bytes, got %s"%type(data).__name__)
        self.data = data
        self.filename = filename

    def read(self):
        return self.data

    @classmethod
    def from_image(cls,image,filename,**save_args):
        """
            Encodes a PIL image in the format registered for the
            extension of 'filename'.

        Arguments :
            image : a PIL.Image.Image
            filename : name sent with the data, ex: 'sunset.jpg'
            save_args : extra arguments for Image.save (quality, ...)
        """
        ext = os.path.splitext(filename)[1].lower()
        try :
            fmt = Image.registered_extensions()[ext]
        except KeyError :
            raise ValueError("No image format for extension '%s'"%ext)
        if fmt == "JPEG" and image.mode not in ("RGB","L","CMYK"):
            image = image.convert("RGB")
        b = io.BytesIO()
        image.save(b,format = fmt,**save_args)
        return cls(b.getvalue(),filename)

    def __repr__(self):
        return "InlineBytes(<%i bytes>, %r)"%(len(self.data),self.filename)

class FileParameter(object):
    """
        Parameter encapsulating file data sent to the upload API.
        'source' is a FilePath, an InlineBytes or a path.
    """
    def __init__(self,name,source):
        if not isinstance(source,(FilePath,InlineBytes)):
            source = FilePath(source)
        self.name = name
        self.source = source
        self._value = None
        self._lock = threading.Lock()

    @property
    def filename(self):
        return self.source.filename

    def mime_type(self):
        return MIME_TYPES.get(os.path.splitext(self.filename)[1])

    def value(self):
        with self._lock :
            if self._value is None :
                self._value = self.source.read()
            return self._value

    def to_form(self):
        return (
            _to_bytes('Content-Disposition: form-data; name="%s"; filename="%s"'%(_quote(self.name),_quote(self.filename))) + CRLF +
            _to_bytes("Content-Type: %s"%(self.mime_type() or "")) + CRLF +
            CRLF +
            self.value() + CRLF
        )

class ValueParameter(object):
    def __init__(self,name,value):
        self.name = name
        self.value = value

    def to_form(self):
        return (
            _to_bytes('Content-Disposition: form-data; name="%s"'%_quote(self.name)) + CRLF +
            CRLF +
            _to_bytes(self.value) + CRLF
        )

class MultipartBody(object):
    """
        Request body made of several parameters separated by 'boundary'.
    """
    def __init__(self,parameters,boundary = None):
        self.parameters = list(parameters)
        self.boundary = boundary or uuid.uuid4().hex

    @property
    def content_type(self):
        return "multipart/form-data; boundary=%s"%self.boundary

    def to_bytes(self):
        delimiter = _to_bytes("--%s"%self.boundary)
        parts = [ delimiter + CRLF + p.to_form() for p in self.parameters ]
        return b"".join(parts) + delimiter + b"--" + CRLF
