from .auth_handler import (
    BearerAuth,
    ChallengeBasicAuth,
    PreemptiveBasicAuth,
    create_auth_handler,
)

__all__ = ["BearerAuth", "ChallengeBasicAuth", "PreemptiveBasicAuth", "create_auth_handler"]
