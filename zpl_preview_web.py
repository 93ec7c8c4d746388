"""Labelary-compatible HTTP API for rendering ZPL labels."""

from __future__ import annotations

import argparse
import logging
import os
from http import HTTPStatus
from urllib.parse import unquote

from dotenv import load_dotenv
from flask import Flask, Response, request

from drawers import MM_PER_INCH, DrawerOptions
from fonts import load_fonts_from_env
from label_generation import ROTATIONS, configure_logging, render_label
from zpl import parse
from zpl.errors import ParseError, RenderError

logger = logging.getLogger(__name__)

__all__ = ["run_web_app", "create_app", "create_app_from_env"]

DEFAULT_MAX_BYTES = 32 << 20


class _BadRequest(Exception):
    pass


def _error(message: str, status: HTTPStatus = HTTPStatus.BAD_REQUEST) -> Response:
    return Response(message, status=status, mimetype="text/plain")


def _parse_dpmm(raw: str) -> int:
    value = raw.removesuffix("dpmm")
    try:
        dpmm = int(value)
    except ValueError:
        raise _BadRequest(f"Invalid dpmm value: {raw}") from None
    if dpmm <= 0:
        raise _BadRequest(f"Invalid dpmm value: {raw}")
    return dpmm


def _parse_dimensions(raw: str) -> tuple[float, float]:
    parts = raw.split("x")
    if len(parts) != 2:
        raise _BadRequest("Invalid dimensions format. Expected: {width}x{height}")
    values: list[float] = []
    for label, part in zip(("width", "height"), parts):
        try:
            value = float(part)
        except ValueError:
            raise _BadRequest(f"Invalid {label} value: {part}") from None
        if value <= 0:
            raise _BadRequest(f"Invalid {label} value: {part}")
        values.append(value)
    return values[0], values[1]


def _parse_index(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise _BadRequest(f"Invalid index value: {raw}") from None


def _parse_rotation(raw: str | None) -> int:
    if not raw:
        return 0
    try:
        rotation = int(raw)
    except ValueError:
        rotation = -1
    if rotation not in ROTATIONS:
        raise _BadRequest("Invalid X-Rotation value. Must be 0, 90, 180, or 270")
    return rotation


def _request_zpl(zpl_path: str) -> bytes:
    """Return the ZPL payload from the URL path, query string or body."""

    if request.method == "GET":
        if zpl_path:
            return zpl_path.encode("utf-8")
        return unquote(request.query_string.decode("latin-1")).encode("utf-8")

    if request.mimetype == "multipart/form-data":
        upload = request.files.get("file")
        if upload is None:
            raise _BadRequest("No 'file' field in multipart form")
        return upload.read()
    return request.get_data()


def create_app(max_content_length: int | None = None) -> Flask:
    """Create the Flask app serving the label rendering API."""

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = max_content_length or int(
        os.getenv("ZPL_PREVIEW_MAX_BYTES", str(DEFAULT_MAX_BYTES))
    )
    # ZPL in the URL path may legitimately contain "//".
    app.url_map.merge_slashes = False

    @app.get("/health")
    def health() -> Response:  # pyright: ignore[reportUnusedFunction]
        return Response("OK", mimetype="text/plain")

    @app.route(
        "/v1/printers/<dpmm>/labels/<dimensions>/<index>/",
        methods=["GET", "POST"],
        defaults={"zpl_path": ""},
    )
    @app.route(
        "/v1/printers/<dpmm>/labels/<dimensions>/<index>/<path:zpl_path>",
        methods=["GET", "POST"],
    )
    def labels(  # pyright: ignore[reportUnusedFunction]
        dpmm: str,
        dimensions: str,
        index: str,
        zpl_path: str,
    ) -> Response:
        try:
            density = _parse_dpmm(dpmm)
            width, height = _parse_dimensions(dimensions)
            label_index = _parse_index(index)
            rotation = _parse_rotation(request.headers.get("X-Rotation"))
            zpl_data = _request_zpl(zpl_path)
        except _BadRequest as exc:
            return _error(str(exc))

        if not zpl_data:
            return _error("No ZPL data provided")

        try:
            parsed = parse(zpl_data)
        except ParseError as exc:
            return _error(f"Failed to parse ZPL: {exc}")

        if not parsed:
            return _error("No labels found in ZPL data")
        if not 0 <= label_index < len(parsed):
            return _error(f"Invalid index {label_index}. Found {len(parsed)} labels")

        options = DrawerOptions(
            dpmm=density,
            label_width_mm=width * MM_PER_INCH,
            label_height_mm=height * MM_PER_INCH,
        )
        try:
            result = render_label(parsed, label_index, options, rotation)
        except RenderError as exc:
            logger.exception("Rendering label %d failed", label_index)
            return _error(
                f"Failed to render label: {exc}",
                HTTPStatus.INTERNAL_SERVER_ERROR,
            )

        logger.info(
            "Rendered label %d of %d at %d dpmm (%gx%g in, rotation %d)",
            label_index,
            len(parsed),
            density,
            width,
            height,
            rotation,
        )
        response = Response(result.png, mimetype="image/png")
        response.headers["X-Total-Count"] = str(len(parsed))
        return response

    return app


def create_app_from_env() -> Flask:
    """Create the Flask app using ZPL_PREVIEW_* environment variables."""
    load_dotenv()
    configure_logging()
    load_fonts_from_env()
    return create_app()


def run_web_app(host: str, port: int) -> None:
    """Launch the Flask development server."""
    app = create_app()

    use_reloader_env = os.getenv("USE_RELOADER")
    use_reloader = (
        str(use_reloader_env).lower() in {"1", "true", "yes", "on"}
        if use_reloader_env is not None
        else False
    )
    app.run(host=host, port=port, debug=False, use_reloader=use_reloader)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the web API."""
    parser = argparse.ArgumentParser(
        description="ZPL label rendering API"
    )
    parser.add_argument(
        "--host",
        default=os.getenv("ZPL_PREVIEW_HOST", "127.0.0.1"),
        help="Host/IP to bind (default: ZPL_PREVIEW_HOST or 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("ZPL_PREVIEW_PORT", "3030")),
        help="Port to listen on (default: ZPL_PREVIEW_PORT or 3030).",
    )

    args = parser.parse_args(argv)
    configure_logging()
    load_fonts_from_env()
    logger.info("Starting Labelary-compatible API server on %s:%d", args.host, args.port)

    run_web_app(host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    load_dotenv()
    main()
