"""Streaming-aware UICP block extractor.

Language models emit UICP blocks token by token, so the text seen so far
often ends in the middle of a block. The extractor classifies every
character as display text, a pending fence/tag, block body, or closing
fence. Text that might still turn into a block is held back until it is
known not to be one, so users never see raw block syntax.

Two calling styles produce identical results:

- ``extract(text)`` rescans the whole text seen so far (simple, quadratic
  over a long stream).
- ``feed(state, chunk)`` resumes from a persisted ``ExtractorState`` and only
  scans the new chunk.

Text held back at the end of a stream is only released once the caller says
the stream is over, with ``final=True`` or ``finish(state)``.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from uicp_parser.models.blocks import ExtractionResult, MalformedBlock, RawBlock
from uicp_parser.models.enums import ExtractorStage
from uicp_parser.observability.logging import get_logger


logger = get_logger(__name__)

FENCE_CHAR = "`"
BLOCK_TAG = "uicp"
OPENING_LINE_TERMINATORS = frozenset("\n \t\r")
ID_KEY = "id"
PAYLOAD_KEY = "payload"
PLACEHOLDER_TEMPLATE = "__UICP_BLOCK_{index}__"
PLACEHOLDER_PATTERN = re.compile(r"__UICP_BLOCK_(\d+)__")

_BODY_STAGES = (
    ExtractorStage.IN_BODY,
    ExtractorStage.SAW_CLOSE_1,
    ExtractorStage.SAW_CLOSE_2,
)

MalformedBlockHandler = Callable[[MalformedBlock], None]


class BlockBodyError(ValueError):
    """A block body does not have the {id, payload} shape."""


@dataclass
class ExtractorState:
    """Persistent cursor of the extractor.

    Attributes:
        stage: Current recognition stage.
        tag_matched: Number of tag letters matched while in SAW_TAG.
        buffer: Held-back fence/tag text that may still turn out to be
            plain text.
        body: Body text of the block currently open.
        display_parts: Display-safe text pieces emitted so far, with the
            index of each completed block where it occurred. Block positions
            are kept apart from the text so that placeholder-shaped text
            written by the model is never mistaken for a block.
        blocks: Blocks completed so far.
        attempted: Number of closed blocks, malformed ones included.
    """

    stage: ExtractorStage = ExtractorStage.NONE
    tag_matched: int = 0
    buffer: str = ""
    body: str = ""
    display_parts: list[Union[str, int]] = field(default_factory=list)
    blocks: list[RawBlock] = field(default_factory=list)
    attempted: int = 0

    @property
    def display_text(self) -> str:
        return "".join(
            placeholder(part) if isinstance(part, int) else part
            for part in self.display_parts
        )

    def parts(self) -> list[Union[str, int]]:
        """Display text runs and block indices in source order."""
        parts: list[Union[str, int]] = []
        run: list[str] = []
        for part in self.display_parts:
            if isinstance(part, int):
                if run:
                    parts.append("".join(run))
                    run = []
                parts.append(part)
            else:
                run.append(part)
        if run:
            parts.append("".join(run))
        return [part for part in parts if part != ""]

    @property
    def is_pending(self) -> bool:
        return self.stage != ExtractorStage.NONE

    @property
    def in_block(self) -> bool:
        return self.stage in _BODY_STAGES


def placeholder(index: int) -> str:
    return PLACEHOLDER_TEMPLATE.format(index=index)


def parse_block_body(body: str) -> tuple[str, dict[str, Any]]:
    """Reads the minimal {id, payload} shape from a block body.

    Args:
        body: The trimmed body text.

    Returns:
        The component id and payload.

    Raises:
        BlockBodyError: If the body is not JSON or lacks the expected shape.
    """
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise BlockBodyError(f"body is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise BlockBodyError("body is not a JSON object")
    component_id = parsed.get(ID_KEY)
    if not isinstance(component_id, str) or not component_id:
        raise BlockBodyError(f"'{ID_KEY}' must be a non-empty string")
    payload = parsed.get(PAYLOAD_KEY)
    if not isinstance(payload, dict):
        raise BlockBodyError(f"'{PAYLOAD_KEY}' must be a JSON object")
    return component_id, payload


class StreamingExtractor:
    """Incremental state machine that pulls UICP blocks out of text.

    Malformed fences degrade to display text. Malformed block bodies are
    dropped, logged, and handed to ``on_malformed`` when one is given; they
    never appear in the display text.
    """

    def __init__(
        self,
        tag: str = BLOCK_TAG,
        on_malformed: Optional[MalformedBlockHandler] = None,
    ):
        """Initializes the extractor.

        Args:
            tag: Literal keyword following the opening fence.
            on_malformed: Optional callback receiving dropped blocks.
        """
        if not tag or FENCE_CHAR in tag or any(
            c in OPENING_LINE_TERMINATORS for c in tag
        ):
            raise ValueError(f"Invalid block tag: {tag!r}")
        self.tag = tag
        self.on_malformed = on_malformed

    def new_state(self) -> ExtractorState:
        return ExtractorState()

    def extract(self, text: str, final: bool = False) -> ExtractionResult:
        """Scans the whole text seen so far from the beginning.

        Args:
            text: Everything received so far.
            final: Whether the stream has ended. Held-back fence text is
                then released and an unclosed block is dropped.

        Returns:
            Display text, completed blocks and the pending flag.
        """
        return self.feed(self.new_state(), text, final=final)

    def feed(
        self, state: ExtractorState, chunk: str, final: bool = False
    ) -> ExtractionResult:
        """Advances a persisted state over the next chunk of text.

        Args:
            state: State returned by ``new_state`` and updated by earlier
                calls. It is modified in place.
            chunk: Newly received text.
            final: Whether this is the last chunk of the stream.

        Returns:
            The result for everything fed into ``state`` so far.
        """
        for char in chunk:
            self._step(state, char)
        if final:
            return self.finish(state)
        return self.result(state)

    def finish(self, state: ExtractorState) -> ExtractionResult:
        """Ends the stream for a state.

        Fence or tag text still held back is plain text after all. A block
        whose body never closed is dropped like a malformed one.
        """
        if state.in_block:
            ordinal = state.attempted
            state.attempted += 1
            body = state.body.strip()
            self._reset(state)
            self._drop(ordinal, body, "block was never closed")
        elif state.stage != ExtractorStage.NONE:
            state.display_parts.append(state.buffer)
            self._reset(state)
        return self.result(state)

    def result(self, state: ExtractorState) -> ExtractionResult:
        return ExtractionResult(
            display_text=state.display_text,
            parts=state.parts(),
            completed_blocks=list(state.blocks),
            is_pending=state.is_pending,
            in_block=state.in_block,
        )

    def _reset(self, state: ExtractorState):
        state.buffer = ""
        state.body = ""
        state.tag_matched = 0
        state.stage = ExtractorStage.NONE

    def _release(self, state: ExtractorState, char: str):
        state.display_parts.append(state.buffer + char)
        state.buffer = ""
        state.tag_matched = 0
        state.stage = ExtractorStage.NONE

    def _step(self, state: ExtractorState, char: str):
        stage = state.stage

        if stage == ExtractorStage.NONE:
            if char == FENCE_CHAR:
                state.buffer = char
                state.stage = ExtractorStage.SAW_OPEN_1
            else:
                state.display_parts.append(char)

        elif stage == ExtractorStage.SAW_OPEN_1:
            if char == FENCE_CHAR:
                state.buffer += char
                state.stage = ExtractorStage.SAW_OPEN_2
            else:
                self._release(state, char)

        elif stage == ExtractorStage.SAW_OPEN_2:
            if char == FENCE_CHAR:
                state.buffer += char
                state.stage = ExtractorStage.SAW_OPEN_3
            else:
                self._release(state, char)

        elif stage == ExtractorStage.SAW_OPEN_3:
            if char == self.tag[0]:
                state.buffer += char
                self._advance_tag(state)
            elif char == FENCE_CHAR:
                # Longer fence run, keep waiting for the tag
                state.buffer += char
            else:
                self._release(state, char)

        elif stage == ExtractorStage.SAW_TAG:
            if char == self.tag[state.tag_matched]:
                state.buffer += char
                self._advance_tag(state)
            else:
                self._release(state, char)

        elif stage == ExtractorStage.CONFIRMED_OPEN:
            if char in OPENING_LINE_TERMINATORS:
                state.buffer = ""
                state.body = ""
                state.tag_matched = 0
                state.stage = ExtractorStage.IN_BODY
            else:
                # e.g. ```uicpx, a longer identifier
                self._release(state, char)

        elif stage == ExtractorStage.IN_BODY:
            if char == FENCE_CHAR:
                state.stage = ExtractorStage.SAW_CLOSE_1
            else:
                state.body += char

        elif stage == ExtractorStage.SAW_CLOSE_1:
            if char == FENCE_CHAR:
                state.stage = ExtractorStage.SAW_CLOSE_2
            else:
                state.body += FENCE_CHAR + char
                state.stage = ExtractorStage.IN_BODY

        elif stage == ExtractorStage.SAW_CLOSE_2:
            if char == FENCE_CHAR:
                state.stage = ExtractorStage.SAW_CLOSE_3
                self._complete(state)
            else:
                state.body += FENCE_CHAR * 2 + char
                state.stage = ExtractorStage.IN_BODY

    def _advance_tag(self, state: ExtractorState):
        state.tag_matched += 1
        if state.tag_matched == len(self.tag):
            state.stage = ExtractorStage.CONFIRMED_OPEN
        else:
            state.stage = ExtractorStage.SAW_TAG

    def _complete(self, state: ExtractorState):
        body = state.body.strip()
        ordinal = state.attempted
        state.attempted += 1
        self._reset(state)

        try:
            component_id, payload = parse_block_body(body)
        except BlockBodyError as e:
            self._drop(ordinal, body, str(e))
            return

        index = len(state.blocks)
        state.blocks.append(
            RawBlock(component_id=component_id, payload=payload, source_span=index)
        )
        state.display_parts.append(index)

    def _drop(self, ordinal: int, body: str, reason: str):
        logger.warning(
            f"Dropped malformed UICP block: {reason}",
            extra={
                "extra_fields": {
                    "event": "uicp.block.malformed",
                    "source_span": ordinal,
                }
            },
        )
        if self.on_malformed is not None:
            self.on_malformed(
                MalformedBlock(source_span=ordinal, body=body, reason=reason)
            )


_default_extractor = StreamingExtractor()


def extract_blocks(text: str, final: bool = False) -> ExtractionResult:
    """Extracts blocks from complete or partial text with default settings."""
    return _default_extractor.extract(text, final=final)


def has_blocks(text: str) -> bool:
    """Returns True when the text contains at least one complete, parseable block."""
    if not might_contain_block(text):
        return False
    return bool(extract_blocks(text).completed_blocks)


def might_contain_block(text: str) -> bool:
    """Quick check for any fence character, without parsing."""
    return FENCE_CHAR in text


def split_display_text(display_text: str) -> list[Union[str, int]]:
    """Splits display text into text pieces and block indices.

    Empty text pieces are omitted. Placeholder-shaped text written by the
    model itself is indistinguishable here; ``ExtractionResult.parts`` keeps
    the two apart.

    >>> split_display_text("Hi __UICP_BLOCK_0__ there")
    ['Hi ', 0, ' there']
    """
    parts: list[Union[str, int]] = []
    position = 0
    for match in PLACEHOLDER_PATTERN.finditer(display_text):
        if match.start() > position:
            parts.append(display_text[position : match.start()])
        parts.append(int(match.group(1)))
        position = match.end()
    if position < len(display_text):
        parts.append(display_text[position:])
    return parts


def format_block(
    component_id: str, payload: dict[str, Any], tag: str = BLOCK_TAG
) -> str:
    """Serializes a component id and payload as block text.

    Fence characters inside JSON strings are written as unicode escapes so
    the body can never close the block early.
    """
    body = json.dumps({ID_KEY: component_id, PAYLOAD_KEY: payload})
    body = body.replace(FENCE_CHAR, "\\u0060")
    fence = FENCE_CHAR * 3
    return f"{fence}{tag}\n{body}\n{fence}"
