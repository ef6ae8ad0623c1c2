from fastapi import Response
from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware


class GatewayCORSMiddleware(CORSMiddleware):
    """CORS de Starlette, mais le preflight accepté répond sans corps (pas de "OK")."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response

        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)
