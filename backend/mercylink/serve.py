"""Run the API under uvicorn.

    python -m mercylink.serve

HOST, PORT, RELOAD, LOG_LEVEL and FORWARDED_ALLOW_IPS tune the server.
SSL_CERTFILE and SSL_KEYFILE enable TLS when both are set.
"""

import os
from typing import Any, Dict

import uvicorn

APP_PATH = "mercylink.main:app"
_TRUTHY = {"1", "true", "yes", "on"}


def uvicorn_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "8000")),
        "reload": os.getenv("RELOAD", "false").lower() in _TRUTHY,
        "log_level": os.getenv("LOG_LEVEL", "info").lower(),
        "proxy_headers": True,
        "forwarded_allow_ips": os.getenv("FORWARDED_ALLOW_IPS", "*"),
    }

    certfile = os.getenv("SSL_CERTFILE")
    keyfile = os.getenv("SSL_KEYFILE")
    if certfile and keyfile:
        options.update(ssl_certfile=certfile, ssl_keyfile=keyfile)
    return options


def main() -> None:
    uvicorn.run(APP_PATH, **uvicorn_options())


if __name__ == "__main__":
    main()
