import pytest

from uicp_parser.parsing.extractor import StreamingExtractor


FENCE = "```"

STREAMS = [
    "Plain text with `inline` code only.",
    'Hello ```uicp\n{"id":"X","payload":{"a":1}}\n``` world',
    'Intro ```python\nx = 1\n``` then ```uicp\n{"id":"X","payload":{"a":2}}\n```!',
    'Bad ```uicp\n{nope}\n``` good ````uicp {"id":"X","payload":{"s":"a``b"}}``` end `',
    '```uicpx no\n```uicp\n{"id":"DataTable","payload":{"columns":[],"rows":[]}}\n```',
]


def chunked(text: str, size: int) -> list[str]:
    return [text[i : i + size] for i in range(0, len(text), size)]


class TestIncrementalExtraction:
    @pytest.mark.parametrize("text", STREAMS)
    @pytest.mark.parametrize("size", [1, 2, 3, 5, 11, 1000])
    def test_feed_matches_full_rescan(self, text, size):
        extractor = StreamingExtractor()
        state = extractor.new_state()
        seen = ""
        for chunk in chunked(text, size):
            seen += chunk
            incremental = extractor.feed(state, chunk)
            assert incremental == extractor.extract(seen)

    def test_completed_blocks_are_stable_across_rescans(self):
        extractor = StreamingExtractor()
        text = STREAMS[2]
        first_close = text.index(f"{FENCE}!")
        earlier = extractor.extract(text[: first_close + 3])
        later = extractor.extract(text)
        assert later.completed_blocks[: len(earlier.completed_blocks)] == (
            earlier.completed_blocks
        )

    def test_malformed_handler_called_once_per_block_incrementally(self):
        dropped = []
        extractor = StreamingExtractor(on_malformed=dropped.append)
        state = extractor.new_state()
        for char in STREAMS[3]:
            extractor.feed(state, char)
        assert len(dropped) == 1
        assert dropped[0].body == "{nope}"

    def test_result_does_not_alias_state(self):
        extractor = StreamingExtractor()
        state = extractor.new_state()
        result = extractor.feed(state, STREAMS[1])
        extractor.feed(state, STREAMS[1])
        assert len(result.completed_blocks) == 1
        assert len(state.blocks) == 2

    @pytest.mark.parametrize("text", STREAMS)
    @pytest.mark.parametrize("size", [1, 4, 1000])
    def test_finish_matches_final_rescan(self, text, size):
        extractor = StreamingExtractor()
        state = extractor.new_state()
        for chunk in chunked(text, size):
            extractor.feed(state, chunk)
        finished = extractor.finish(state)
        assert finished == extractor.extract(text, final=True)
        assert finished.is_pending is False

    def test_final_flag_on_last_chunk(self):
        extractor = StreamingExtractor()
        state = extractor.new_state()
        extractor.feed(state, "Use `ls")
        result = extractor.feed(state, "` here`", final=True)
        assert result.display_text == "Use `ls` here`"
        assert result.is_pending is False
