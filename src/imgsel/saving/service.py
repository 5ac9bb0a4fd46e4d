"""Save workflow: gather media, check quota, pick a target, write files."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from imgsel.config.models import ImgselConfig
from imgsel.errors import PromptTimeout, QuotaDenied
from imgsel.library.directory import list_collections
from imgsel.library.resolver import TokenResolver
from imgsel.session import Fetcher, Identity, MediaElement, Notifier, Prompter, Reply

from .models import ItemOutcome, ItemStatus, SaveRequest, SaveResult, SaveStatus
from .naming import build_context, detect_extension, render_filename
from .quota import BYTES_PER_MB, QuotaDecision, QuotaResolver

LOGGER = logging.getLogger(__name__)

MEDIA_PROMPT = "Send the images or videos to save."
KEYWORD_PROMPT = "Reply with the collection name or alias to save into."


class SaveService:
    """Store inbound media under the collection named by a keyword.

    Each call is independent: the library is re-listed for every request and
    one item failing never stops the rest of its batch.
    """

    def __init__(
        self,
        config: ImgselConfig,
        *,
        quota: Optional[QuotaResolver] = None,
        resolver: Optional[TokenResolver] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.quota = quota or QuotaResolver.from_settings(config.limits)
        self.resolver = resolver or TokenResolver(max_output=config.library.max_output)
        self._clock = clock

    async def save(
        self,
        request: SaveRequest,
        *,
        notifier: Notifier,
        prompter: Prompter,
        fetcher: Fetcher,
    ) -> SaveResult:
        """Run the save workflow for one request.

        Args:
            request: Inbound save command.
            notifier: Output channel for progress and the final summary.
            prompter: Used when media or a keyword must be asked for.
            fetcher: Retrieves the bytes behind each media URL.

        Returns:
            SaveResult: Overall status plus one outcome per media element.
        """
        settings = self.config.save

        try:
            media = await self._gather_media(request, prompter)
        except PromptTimeout:
            return await self._finish(
                notifier, SaveResult(SaveStatus.TIMED_OUT, "No image or video received.")
            )
        if not media:
            return await self._finish(
                notifier, SaveResult(SaveStatus.NO_MEDIA, "No valid image or video received.")
            )

        keyword = (request.keyword or "").strip()
        if not keyword:
            try:
                reply = await self._ask(prompter, KEYWORD_PROMPT, settings.keyword_timeout)
            except PromptTimeout:
                return await self._finish(
                    notifier,
                    SaveResult(SaveStatus.TIMED_OUT, "Timed out waiting for a keyword; nothing saved."),
                )
            keyword = reply.text.strip()

        try:
            decision = self.quota.require(request.identity)
        except QuotaDenied:
            return await self._finish(
                notifier,
                SaveResult(SaveStatus.DENIED, "You do not have permission to upload files."),
            )

        library_root = self.config.library.image_path.expanduser()
        try:
            collections = list_collections(library_root)
        except OSError as exc:
            return await self._finish(
                notifier, SaveResult(SaveStatus.IO_ERROR, f"Save failed: {exc}")
            )

        collection = self.resolver.resolve_exact(keyword, collections) if keyword else None
        if collection is not None:
            target = collection.path
            target_name: Optional[str] = collection.name
        elif settings.fallback_on_miss:
            LOGGER.debug("Keyword %r matched no collection; using holding directory.", keyword)
            target = self.config.library.temp_path.expanduser()
            target_name = None
        else:
            return await self._finish(
                notifier,
                SaveResult(
                    SaveStatus.CANCELLED,
                    f'Keyword "{keyword}" matched no collection; save cancelled.',
                ),
            )

        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            return await self._finish(
                notifier, SaveResult(SaveStatus.IO_ERROR, f"Save failed: {exc}")
            )

        base_timestamp = int(self._clock() * 1000)
        outcomes: list[ItemOutcome] = []
        for position, element in enumerate(media, start=1):
            outcome = await self._save_item(
                element,
                position=position,
                total=len(media),
                target=target,
                identity=request.identity,
                decision=decision,
                timestamp_ms=base_timestamp + position - 1,
                notifier=notifier,
                fetcher=fetcher,
            )
            outcomes.append(outcome)

        saved = sum(1 for outcome in outcomes if outcome.status is ItemStatus.SAVED)
        if target_name is not None:
            message = f'Saved {saved} file(s) to "{target_name}".'
        else:
            message = f'No collection "{keyword}" found; saved {saved} file(s) to the holding folder.'

        return await self._finish(
            notifier,
            SaveResult(
                SaveStatus.COMPLETED,
                message,
                saved_count=saved,
                target_name=target_name,
                target_path=target,
                fallback_used=target_name is None,
                outcomes=outcomes,
            ),
        )

    async def _gather_media(self, request: SaveRequest, prompter: Prompter) -> list[MediaElement]:
        media = list(request.quoted) if request.quoted else list(request.media)
        if media:
            return media
        reply = await self._ask(prompter, MEDIA_PROMPT, self.config.save.prompt_timeout)
        return list(reply.media)

    async def _ask(self, prompter: Prompter, text: str, timeout: float) -> Reply:
        reply = await prompter.ask(text, timeout)
        if reply is None:
            raise PromptTimeout(text)
        return reply

    async def _save_item(
        self,
        element: MediaElement,
        *,
        position: int,
        total: int,
        target: Path,
        identity: Identity,
        decision: QuotaDecision,
        timestamp_ms: int,
        notifier: Notifier,
        fetcher: Fetcher,
    ) -> ItemOutcome:
        if not element.url:
            return ItemOutcome(position, ItemStatus.SKIPPED_NO_URL, detail="missing media url")

        try:
            fetched = await fetcher.fetch(element.url)
        except Exception as exc:
            LOGGER.debug("Fetching %s failed: %s", element.url, exc)
            return ItemOutcome(position, ItemStatus.FAILED, detail=f"fetch failed: {exc}")
        if fetched is None or not fetched.data:
            LOGGER.debug("No data returned for %s", element.url)
            return ItemOutcome(position, ItemStatus.FAILED, detail="no data returned")

        size = len(fetched.data)
        if decision.exceeds(size):
            size_mb = size / BYTES_PER_MB
            detail = (
                f"File {position} ({size_mb:.2f}MB) exceeds the limit "
                f"({decision.limit_mb:g}MB); skipped."
            )
            LOGGER.debug(detail)
            await notifier.send_text(detail)
            return ItemOutcome(
                position, ItemStatus.SKIPPED_OVERSIZE, size_bytes=size, detail=detail
            )

        ext = detect_extension(fetched.content_type or element.content_type, element.kind)
        context = build_context(identity, index=position, ext=ext, timestamp_ms=timestamp_ms)
        filename = render_filename(self.config.save.filename_template, context)
        path = target / filename
        try:
            path.write_bytes(fetched.data)
        except OSError as exc:
            return ItemOutcome(
                position, ItemStatus.FAILED, size_bytes=size, detail=f"write failed: {exc}"
            )

        LOGGER.debug("Saved file %d/%d: %s", position, total, filename)
        return ItemOutcome(position, ItemStatus.SAVED, path=path, size_bytes=size)

    async def _finish(self, notifier: Notifier, result: SaveResult) -> SaveResult:
        await notifier.send_text(result.message)
        return result


__all__ = ["KEYWORD_PROMPT", "MEDIA_PROMPT", "SaveService"]
