from enum import Enum


# Enums for HTTP Methods
class HttpMethod(str, Enum):
    POST = "POST"


# HTTP request headers
class HttpHeader(str, Enum):
    CONTENT_TYPE = "Content-Type"
    AUTH_TOKEN = "X-Auth-Token"
    USER_AGENT = "User-Agent"
