"""Hello — a small API guarded by every built-in plugin.

Shows the route tree and hook inheritance: logging and CORS hooks sit on
the root and apply everywhere, the JWT hook sits on ``/api`` and guards
only what is registered below it.

Run with any ASGI server:
    cd examples/hello && uvicorn app:app
"""

import os

from gazelle import App, Request, Response
from gazelle.plugins import CorsConfig, CorsPlugin, JwtPlugin, LoggerPlugin

app = App()

app.register_plugin(LoggerPlugin())
app.register_plugin(CorsPlugin(CorsConfig(
    allow_origins=("*",),
    allow_methods=("GET", "POST", "OPTIONS"),
    allow_headers=("Authorization", "Content-Type"),
)))
app.register_plugin(JwtPlugin(os.environ.get("GAZELLE_SECRET", "change-me-to-a-32-byte-long-secret!!")))

log = app.get_plugin(LoggerPlugin)
cors = app.get_plugin(CorsPlugin)
jwt = app.get_plugin(JwtPlugin)

app.hooks(
    "/",
    pre_hooks=[log.log_request_hook, cors.preflight_hook],
    post_hooks=[cors.headers_hook, log.log_response_hook],
)
app.hooks("/api", pre_hooks=[jwt.authentication_hook])


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.route("/")
def index(response: Response) -> Response:
    return response.with_body("Hello, Gazelle!")


@app.route("/login", methods=["POST"])
def login(request: Request) -> str:
    name = request.json().get("name", "anonymous")
    return jwt.sign({"sub": name})


@app.route("/api/greet/:name")
def greet(request: Request, name: str) -> str:
    return f"Hello, {name}! You are signed in as {request.metadata['jwt']['sub']}."


app.options("/api/greet/:name", cors.preflight)


@app.error(404)
def not_found(request: Request) -> str:
    return f"Nothing at {request.path}"
