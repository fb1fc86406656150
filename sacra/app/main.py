"""Headless entry point wiring the screen controller to a record source.

Builds the controller for the default catalog, mounts one record list per
category against either the offline mock or a GraphQL endpoint, runs a
broadcast refresh, and logs a per-category summary. Useful as a smoke check
of a deployment's endpoint and credentials.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List, Optional, Sequence

from sacra.adapters.records_graphql import GraphQLRecordsAdapter
from sacra.adapters.records_mock import RecordsMock
from sacra.app.record_list_controller import RecordListController
from sacra.app.screen_controller import SacramentsScreenController
from sacra.domain.ports import RecordSource
from sacra.utils.logging import setup_logging
from sacra.viewmodels.settings_vm import ScreenSettings

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Refresh every sacrament record list once.")
    parser.add_argument("--graphql-url", default=None, help="GraphQL endpoint (default: offline mock)")
    parser.add_argument("--api-token", default=None, help="Bearer token for the endpoint")
    parser.add_argument("--timeout", type=int, default=None, help="Request timeout in seconds")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def build_source(settings: ScreenSettings, controller: SacramentsScreenController) -> RecordSource:
    if settings.has_endpoint:
        return GraphQLRecordsAdapter(
            settings.graphql_url,
            api_token=settings.api_token or None,
            request_timeout_s=settings.request_timeout_s,
            retries=settings.retries,
        )
    return RecordsMock.with_rows(controller.catalog.categories)


async def run(controller: SacramentsScreenController, source: RecordSource) -> int:
    lists: List[RecordListController] = []
    for category in controller.catalog.categories:
        lst = controller.list_controller(category, source)
        lst.mount(fetch=False)
        lists.append(lst)
    try:
        results = await controller.refresh_everything()
    finally:
        for lst in lists:
            lst.unmount()
    failed = [key for key, ok in results.items() if not ok]
    for lst in lists:
        LOGGER.info(
            "%-28s %3d records%s",
            controller.catalog.label_for(lst.category),
            len(lst.records),
            "  (failed)" if lst.category in failed else "",
        )
    return 1 if failed else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = ScreenSettings.from_env()
    overrides = {}
    if args.graphql_url is not None:
        overrides["graphql_url"] = args.graphql_url
    if args.api_token is not None:
        overrides["api_token"] = args.api_token
    if args.timeout is not None:
        overrides["request_timeout_s"] = args.timeout
    if args.debug:
        overrides["debug_logging"] = True
    settings = settings.apply(overrides)
    level = setup_logging(settings.debug_logging)
    LOGGER.debug("Log level %s", logging.getLevelName(level))

    controller = SacramentsScreenController(settings=settings)
    source = build_source(settings, controller)
    try:
        return asyncio.run(run(controller, source))
    finally:
        controller.dispose()


if __name__ == "__main__":
    raise SystemExit(main())
