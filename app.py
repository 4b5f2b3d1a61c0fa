from flask import Flask, render_template, flash, redirect, request, url_for
from urllib.parse import urlparse

from config import Config
from extensions import backend, csrf
from register_blueprints import register_blueprints
from rest_client import BackendError


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = "dev-change-me"  # session-backed list state needs a key

    csrf.init_app(app)
    backend.init_app(app)
    register_blueprints(app)

    @app.route('/')
    def index():
        return render_template('index.html')

    # where to send the user after a failed request
    def _safe_redirect_target() -> str:
        path = (request.path or "").lower()
        if request.method == "POST" and any(seg in path for seg in ("/create", "/edit")):
            return request.path  # GET the same form
        ref = request.referrer
        if ref:
            parsed = urlparse(ref)
            if (not parsed.netloc or parsed.netloc == request.host) and parsed.path != request.path:
                return ref
        return url_for('index')

    def _backend_error_handler(e):
        app.logger.warning(f"BackendError caught: {e} (status={e.status_code})")
        flash('The backend is unavailable or rejected the request. Please try again.', 'danger')
        return redirect(_safe_redirect_target()), 303

    def _not_found_handler(e):
        return render_template('not_found.html', message='Page not found'), 404

    app.register_error_handler(BackendError, _backend_error_handler)
    app.register_error_handler(404, _not_found_handler)

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5001, debug=True)
