"""Cursor-following fetch loop over the Graph messages list endpoint."""

from __future__ import annotations

from collections.abc import Callable, Collection
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from .exceptions import FetchError, redact
from .interface import TokenSource
from .models import ControlSignal, FetchState, FetchSummary, Page, Row, Schema
from .schema import RowProjector

logger = structlog.get_logger()

NEXT_LINK_FIELD = "@odata.nextLink"
VALUE_FIELD = "value"

Emit = Callable[[Row], ControlSignal]


def sender_filter_expression(sender: str) -> str:
    """OData ``$filter`` matching messages from *sender*."""
    escaped = sender.replace("'", "''")
    return f"from/emailAddress/address eq '{escaped}'"


class PaginatedFetcher:
    """Drives the list endpoint page by page and emits projected rows.

    Requests are issued one at a time.  The emit callback is consulted
    after every row; an ``ABORT`` ends the fetch before the next row and
    before any further request.
    """

    def __init__(
        self,
        tokens: TokenSource,
        http: httpx.Client,
        *,
        graph_base_url: str = "https://graph.microsoft.com/v1.0",
    ) -> None:
        self._tokens = tokens
        self._http = http
        self._base_url = graph_base_url.rstrip("/")
        self.state: FetchState = FetchState.START

    def initial_url(self, mailbox: str, sender_filter: str, schema: Schema) -> str:
        url = httpx.URL(
            f"{self._base_url}/users/{quote(mailbox, safe='@')}/messages",
            params={
                "$filter": sender_filter_expression(sender_filter),
                "$select": ",".join(schema.names),
            },
        )
        return str(url)

    def fetch(
        self,
        mailbox: str,
        sender_filter: str,
        schema: Schema,
        included_columns: Collection[str] | None,
        emit: Emit,
    ) -> FetchSummary:
        """Emit a row for every message from *sender_filter* in *mailbox*.

        Returns a summary whose state is ``DONE`` when the cursor ran out
        or ``ABORTED`` when *emit* asked to stop.  Errors propagate and
        leave the state at ``FAILED``; rows already emitted stay emitted.
        """
        projector = RowProjector(schema)
        summary = FetchSummary(state=FetchState.START)
        url: str | None = self.initial_url(mailbox, sender_filter, schema)

        try:
            while url is not None:
                self.state = FetchState.FETCHING_PAGE
                page = self._get_page(url)
                summary.pages += 1
                logger.debug(
                    "page_fetched",
                    mailbox=mailbox,
                    page=summary.pages,
                    records=len(page.records),
                )

                self.state = FetchState.EMITTING_RECORDS
                for record in page.records:
                    row = projector.project(record, included_columns)
                    signal = emit(row)
                    summary.rows += 1
                    if signal == ControlSignal.ABORT:
                        return self._finish(summary, FetchState.ABORTED, mailbox)

                self.state = FetchState.FOLLOWING_CURSOR
                url = page.next_cursor
        except Exception as exc:
            self.state = FetchState.FAILED
            summary.state = FetchState.FAILED
            logger.warning(
                "fetch_failed",
                mailbox=mailbox,
                pages=summary.pages,
                rows=summary.rows,
                error=str(exc),
            )
            raise

        return self._finish(summary, FetchState.DONE, mailbox)

    def _finish(self, summary: FetchSummary, state: FetchState, mailbox: str) -> FetchSummary:
        self.state = state
        summary.state = state
        logger.info(
            "fetch_finished",
            mailbox=mailbox,
            state=state.value,
            pages=summary.pages,
            rows=summary.rows,
        )
        return summary

    def _get_page(self, url: str) -> Page:
        token = self._tokens.get_token().token
        try:
            response = self._http.get(url, headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as exc:
            raise FetchError(redact(f"List request failed: {exc}", token)) from exc

        if response.is_error:
            raise FetchError(
                redact(
                    f"List request returned HTTP {response.status_code}: {response.text}",
                    token,
                ),
                status_code=response.status_code,
            )

        try:
            body: Any = response.json()
        except ValueError as exc:
            raise FetchError(
                f"List response is not valid JSON: {exc}",
                status_code=response.status_code,
            ) from exc

        if not isinstance(body, dict):
            raise FetchError(f"List response is not a JSON object: {type(body).__name__}")

        records = body.get(VALUE_FIELD)
        if records is None:
            records = []
        elif not isinstance(records, list):
            raise FetchError(f"List response {VALUE_FIELD!r} is not an array")

        next_cursor = body.get(NEXT_LINK_FIELD) or None
        if next_cursor is not None and not isinstance(next_cursor, str):
            raise FetchError(f"List response {NEXT_LINK_FIELD!r} is not a string")

        return Page(records=records, next_cursor=next_cursor)
