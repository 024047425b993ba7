"""Token request redirect URLs."""

from ..core.util import url_encode
from .state import TokenRequestState

TOKEN_REQUEST_TEMPLATE = "https://{host}/request-token/{request_id}?state={state}"


def generate_token_request_url(
    web_app_host: str,
    request_id: str,
    state: str = "",
    csrf_token: str = ""
) -> str:
    """URL that sends the user to Token's web app to complete a request.

    Args:
        web_app_host: Host of the Token web app for the cluster
        request_id: Id of the stored token request
        state: Caller state returned on the callback
        csrf_token: Caller secret; its hash is bound into the state
    """
    request_state = TokenRequestState.create(csrf_token, state)
    return TOKEN_REQUEST_TEMPLATE.format(
        host=web_app_host,
        request_id=request_id,
        state=url_encode(request_state.serialize())
    )
