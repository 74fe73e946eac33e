"""
Request ID tracking.

Reuses an incoming X-Request-ID or mints one, stores it on ``g`` and echoes
it back so a request can be followed through the logs.
"""
import uuid

from flask import g, request

REQUEST_ID_HEADER = 'X-Request-ID'


def init_request_id_tracking(app) -> None:
    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

    @app.after_request
    def echo_request_id(response):
        request_id = g.get('request_id')
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response
