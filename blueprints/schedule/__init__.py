# url_prefix задаётся в app.register_blueprint(..., url_prefix="/api/v1")
from .routes import api_bp  # noqa: F401
