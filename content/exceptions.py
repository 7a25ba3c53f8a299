class ContentError(Exception):
    status_code = 500


class ContentNotFound(ContentError):
    status_code = 404


class InvalidContentPath(ContentError):
    status_code = 400


class ContentFormatError(ContentError):
    status_code = 500
