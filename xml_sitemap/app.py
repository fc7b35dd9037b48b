"""
1.0 Web Application
Flask app serving the generated sitemap.

Routes:
- GET /sitemap.xml (and /): the sitemap document
- GET /<xsl>: the configured stylesheet, read from the scanned directory
"""

import logging
import os
from typing import Optional

from flask import Flask, Response, abort, request, send_from_directory

from xml_sitemap.config import SitemapConfig, load_config
from xml_sitemap.exceptions import SitemapError
from xml_sitemap.generator import generate_sitemap

logger = logging.getLogger(__name__)


def create_app(config: Optional[SitemapConfig] = None, config_path: Optional[str] = None) -> Flask:
    """
    2.0 Build the Flask application.

    The configuration is loaded once here, not per request.

    Raises:
        ConfigError: no usable configuration file.
    """
    if config is None:
        config = load_config(config_path)

    app = Flask(__name__)
    app.config["SITEMAP"] = config

    @app.route("/")
    @app.route("/sitemap.xml")
    def sitemap():
        try:
            result = generate_sitemap(app.config["SITEMAP"], request_base_url=request.host_url)
        except SitemapError as e:
            logger.error(f"Failed to generate sitemap: {e}")
            return Response(f"Error: {e}\n", status=500, mimetype="text/plain")
        return Response(result.body, headers=result.headers)

    if config.xsl:
        @app.route("/" + config.xsl.lstrip("/"))
        def stylesheet():
            directory = os.path.abspath(app.config["SITEMAP"].directory)
            if not os.path.isfile(os.path.join(directory, config.xsl)):
                abort(404)
            return send_from_directory(directory, config.xsl, mimetype="text/xsl")

    logger.info(f"Sitemap app ready for directory {config.directory}")
    return app
