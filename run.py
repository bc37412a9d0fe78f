import sys

from storefront import create_app
from storefront.config import resolve_port


def main():
    app = create_app()
    port = resolve_port()
    try:
        app.run(host=app.config["HOST"], port=port, threaded=True)
    except OSError as exc:
        app.logger.critical("cannot listen on port %s: %s", port, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
