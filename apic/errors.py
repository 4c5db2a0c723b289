"""
Error hierarchy for the request pipeline
"""


class ApicError(Exception):
    """Base class for every error raised by apic itself"""


class RequestError(ApicError):
    """Request could not be built or configured"""


class BodyError(ApicError):
    """Request body could not be prepared for sending"""


class BodyReadError(BodyError):
    """Request body could not be read into memory"""


class BodySeekError(BodyError):
    """Request body could not be rewound for another attempt"""


class BodyEncodeError(BodyError):
    """Value could not be encoded into a request body"""


class ResponseBodyReadError(ApicError):
    """Response body could not be drained"""
