"""
Fan-out/fan-in coordinator.

Drives the adapter calls for one run and reports progress as a stream of
events: one per channel resolution, then a single RunSettled.

- description: enhance_text first (its result feeds the other two); on
  success synthesize_image and synthesize_html run concurrently and the
  run settles when both have returned. A prompt failure or an empty
  prompt ends the run without issuing the dependent calls.
- modify: one restyle_html call.
- clone: one clone_url call; html and grounding sources land together.

No retries. Adapter failures are converted into channel errors here and
never propagate out of the event stream.
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Any, AsyncIterator, Awaitable, Callable, Union

from shared.logging import get_logger

from .adapters import CloneResult, GenerationAdapters
from .channels import ChannelErrorAggregator, ChannelErrors
from .models import (
    Channel,
    CloneInput,
    CloneOutput,
    DescriptionInput,
    DescriptionOutput,
    ModifyInput,
    ModifyOutput,
    RunInput,
    RunOutput,
)

log = get_logger("studio", "coordinator")


@dataclass(frozen=True)
class ChannelResolved:
    """A channel produced its value; output is the run's output so far."""
    run_id: int
    channel: Channel
    output: RunOutput


@dataclass(frozen=True)
class ChannelFailed:
    run_id: int
    channel: Channel
    message: str


@dataclass(frozen=True)
class RunSettled:
    """Every channel applicable to the run has a result or an error."""
    run_id: int
    output: RunOutput
    errors: ChannelErrors


RunEvent = Union[ChannelResolved, ChannelFailed, RunSettled]


@dataclass(frozen=True)
class _Outcome:
    channel: Channel
    ok: bool
    value: Any = None


class Coordinator:
    """
    Issues adapter calls for a validated run input.

    Stateless between runs; the caller supplies the run id used to tag
    every event.
    """

    def __init__(self, adapters: GenerationAdapters):
        self.adapters = adapters

    async def _call(
        self,
        channel: Channel,
        operation: str,
        call: Callable[[], Awaitable[Any]],
    ) -> _Outcome:
        start = log.call_start(operation, channel=channel.value)
        try:
            value = await call()
        except Exception as e:
            log.call_error(operation, e, start_time=start, channel=channel.value)
            return _Outcome(channel, ok=False)
        log.call_complete(operation, start, channel=channel.value)
        return _Outcome(channel, ok=True, value=value)

    async def run(self, run_id: int, run_input: RunInput) -> AsyncIterator[RunEvent]:
        """
        Execute one run, yielding events as channels resolve.

        The final event is always RunSettled.
        """
        if isinstance(run_input, DescriptionInput):
            events = self._run_description(run_id, run_input)
        elif isinstance(run_input, ModifyInput):
            events = self._run_modify(run_id, run_input)
        elif isinstance(run_input, CloneInput):
            events = self._run_clone(run_id, run_input)
        else:
            raise TypeError(f"not a run input: {run_input!r}")

        log.info("studio.coordinator.run_started", run_id=run_id, mode=run_input.mode.value)

        try:
            async for event in events:
                if isinstance(event, RunSettled):
                    log.info("studio.coordinator.run_settled",
                             run_id=run_id,
                             mode=run_input.mode.value,
                             failed_channels=[c.value for c in event.errors])
                yield event
        finally:
            await events.aclose()

    async def _run_description(self, run_id: int, run_input: DescriptionInput) -> AsyncIterator[RunEvent]:
        aggregator = ChannelErrorAggregator(run_input.mode)
        output = DescriptionOutput()

        enhanced = await self._call(
            Channel.PROMPT, "enhance_text",
            lambda: self.adapters.enhance_text(run_input.text, run_input.style),
        )
        if not enhanced.ok:
            # Dependent channels are never attempted
            yield ChannelFailed(run_id, Channel.PROMPT, aggregator.fail(Channel.PROMPT))
            yield RunSettled(run_id, output, aggregator.errors())
            return

        prompt = enhanced.value
        aggregator.succeed(Channel.PROMPT)
        output = replace(output, enhanced_prompt=prompt)
        yield ChannelResolved(run_id, Channel.PROMPT, output)

        if not prompt:
            # Nothing to render from; image and html stay unattempted
            log.warning("studio.coordinator.empty_prompt", run_id=run_id)
            yield RunSettled(run_id, output, aggregator.errors())
            return

        pending = [
            asyncio.create_task(self._call(
                Channel.IMAGE, "synthesize_image",
                lambda: self.adapters.synthesize_image(prompt),
            )),
            asyncio.create_task(self._call(
                Channel.HTML, "synthesize_html",
                lambda: self.adapters.synthesize_html(prompt),
            )),
        ]
        try:
            for next_done in asyncio.as_completed(pending):
                outcome = await next_done
                if not outcome.ok:
                    yield ChannelFailed(run_id, outcome.channel, aggregator.fail(outcome.channel))
                    continue
                aggregator.succeed(outcome.channel)
                if outcome.channel == Channel.IMAGE:
                    output = replace(output, preview_image=outcome.value)
                else:
                    output = replace(output, html=outcome.value)
                yield ChannelResolved(run_id, outcome.channel, output)
        finally:
            # Only reached with pending work if the consumer stopped early
            for task in pending:
                if not task.done():
                    task.cancel()

        yield RunSettled(run_id, output, aggregator.errors())

    async def _run_modify(self, run_id: int, run_input: ModifyInput) -> AsyncIterator[RunEvent]:
        aggregator = ChannelErrorAggregator(run_input.mode)
        output = ModifyOutput()

        outcome = await self._call(
            Channel.HTML, "restyle_html",
            lambda: self.adapters.restyle_html(run_input.base_html, run_input.style_html),
        )
        if outcome.ok:
            aggregator.succeed(Channel.HTML)
            output = ModifyOutput(html=outcome.value)
            yield ChannelResolved(run_id, Channel.HTML, output)
        else:
            yield ChannelFailed(run_id, Channel.HTML, aggregator.fail(Channel.HTML))

        yield RunSettled(run_id, output, aggregator.errors())

    async def _run_clone(self, run_id: int, run_input: CloneInput) -> AsyncIterator[RunEvent]:
        aggregator = ChannelErrorAggregator(run_input.mode)
        output = CloneOutput()

        outcome = await self._call(
            Channel.HTML, "clone_url",
            lambda: self.adapters.clone_url(run_input.url, run_input.screenshots),
        )
        if outcome.ok and isinstance(outcome.value, CloneResult):
            aggregator.succeed(Channel.HTML)
            output = CloneOutput(
                html=outcome.value.html,
                grounding_sources=tuple(outcome.value.grounding_sources),
            )
            yield ChannelResolved(run_id, Channel.HTML, output)
        else:
            if outcome.ok:
                log.error("studio.coordinator.bad_clone_result",
                          run_id=run_id, result_type=type(outcome.value).__name__)
            yield ChannelFailed(run_id, Channel.HTML, aggregator.fail(Channel.HTML))

        yield RunSettled(run_id, output, aggregator.errors())
