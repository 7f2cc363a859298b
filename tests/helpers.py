import json

import requests


def make_response(status_code=200, json_body=None, text=None, reason="OK"):
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    if json_body is not None:
        text = json.dumps(json_body)
    response._content = (text or "").encode("utf-8")
    return response
