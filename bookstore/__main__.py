"""
Development server.

Run one service per process:

    python -m bookstore gateway     # port 3000
    python -m bookstore auth        # port 3011
    python -m bookstore book        # port 3006
    python -m bookstore author      # port 3005
    python -m bookstore category    # port 3007

In production, point uvicorn at a factory directly, e.g.:
    uvicorn bookstore.main:create_auth_app --factory --host 0.0.0.0 --port 3011
"""

import argparse

import uvicorn

from bookstore.config import get_settings

SERVICES = {
    "gateway": ("bookstore.main:create_gateway_app", 3000),
    "auth": ("bookstore.main:create_auth_app", 3011),
    "book": ("bookstore.main:create_book_service_app", 3006),
    "author": ("bookstore.main:create_author_service_app", 3005),
    "category": ("bookstore.main:create_category_service_app", 3007),
}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="bookstore", description=__doc__.splitlines()[1])
    parser.add_argument("service", choices=sorted(SERVICES), help="Service to run")
    parser.add_argument("--port", type=int, default=None, help="Override the service's port")
    args = parser.parse_args(argv)

    settings = get_settings()
    factory, default_port = SERVICES[args.service]
    uvicorn.run(
        factory,
        factory=True,
        host=settings.host,
        port=args.port or settings.port or default_port,
        reload=settings.debug,  # Auto-reload on code changes
    )


if __name__ == "__main__":
    main()
