# Shared pieces of the JSON API: error mapping, query-string parsing and the
# transaction wrapper used by the service modules.
from .errors import register_error_handlers  # noqa: F401
from .store import store_call  # noqa: F401
