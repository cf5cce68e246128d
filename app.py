#!/usr/bin/env python3
import os
import sys

from aws_cdk import App, Environment

from site_infra.cidr import ADDRESS_INPUT_NAME, CIDR_INPUT_NAME, AllowListError, resolve_allow_list_entry
from site_infra.logger import get_logger, setup_logging
from site_infra.web_app_stack import WebAppStack

logger = get_logger(__name__)


def build_app(environ=None, app: App = None) -> App:
    """
    resolves the allow-listed CIDR block from the environment and defines the web app stack
    """
    environ = os.environ if environ is None else environ
    app = app or App()

    allow_ipv6 = app.node.try_get_context("allow_ipv6")
    allow_list_entry = resolve_allow_list_entry(
        environ.get(CIDR_INPUT_NAME),
        environ.get(ADDRESS_INPUT_NAME),
        allow_ipv6=True if allow_ipv6 is None else str(allow_ipv6).lower() == "true"
    )
    logger.info("Allow-listing %s (%s)", allow_list_entry, allow_list_entry.family.waf_version)

    WebAppStack(
        app, "SimpleFormWebAppStack", "webapp",
        allow_list_entry=allow_list_entry,
        description="S3 + CloudFront hosted React app with API Gateway (/api) backed by Lambda (ice cream picker)",
        env=Environment(region="us-east-1")
    )
    return app


def main() -> None:
    setup_logging(json=os.getenv("LOG_JSON", "true").lower() == "true")
    try:
        app = build_app()
    except AllowListError as exc:
        logger.error("Cannot configure the allow-list: %s", exc)
        sys.exit(1)
    app.synth()


if __name__ == "__main__":
    main()
