from __future__ import annotations

import pytest

from captionsync.exceptions import InvalidConfigError
from captionsync.services.chunker import chunk_sentences
from captionsync.services.segmenter import segment_sentences


def test_short_sentences_pack_into_one_chunk() -> None:
    assert chunk_sentences(["Hello world.", "This is a test."], 8) == [
        "Hello world. This is a test."
    ]


def test_unpunctuated_sentences_are_joined_with_period() -> None:
    assert chunk_sentences(["Hello world", "This is a test"], 8) == [
        "Hello world. This is a test"
    ]


def test_flushes_when_next_sentence_would_overflow() -> None:
    chunks = chunk_sentences(["one two three", "four five six seven"], 5)
    assert chunks == ["one two three", "four five six seven"]


def test_oversized_sentence_splits_into_fixed_groups() -> None:
    chunks = chunk_sentences(["a b c d e f g", "h i"], 3)
    # Trailing partial group keeps absorbing the following short sentence.
    assert chunks == ["a b c", "d e f", "g. h i"]


def test_oversized_sentence_flushes_pending_chunk_first() -> None:
    chunks = chunk_sentences(["x y", "a b c d"], 3)
    assert chunks == ["x y", "a b c", "d"]


def test_oversized_exact_multiple() -> None:
    assert chunk_sentences(["a b c d e f", "g"], 3) == ["a b c", "d e f", "g"]


def test_punctuated_tail_group_joins_with_space() -> None:
    chunks = chunk_sentences(["One two three four five.", "Six."], 4)
    assert chunks == ["One two three four", "five. Six."]


def test_empty_input_yields_no_chunks() -> None:
    assert chunk_sentences([], 8) == []
    assert chunk_sentences(segment_sentences(""), 8) == []


@pytest.mark.parametrize("bad", [0, -1, True, 2.5, "8", None])
def test_rejects_invalid_max_words(bad) -> None:  # noqa: ANN001
    with pytest.raises(InvalidConfigError):
        chunk_sentences(["Hello world."], bad)


def test_chunks_conserve_words_and_respect_bound() -> None:
    text = (
        "The lighthouse keeper climbed the stairs every evening. "
        "He counted each step aloud, one hundred and twelve in all, "
        "and when the lamp was lit he sat by the window and watched the ships. "
        "Nobody came. Nobody ever came! Still he waited?"
    )
    sentences = list(segment_sentences(text))
    expected_words = " ".join(sentences).split()
    for max_words in (1, 2, 5, 8, 13, 50):
        chunks = chunk_sentences(sentences, max_words)
        assert all(len(chunk.split()) <= max_words for chunk in chunks)
        assert " ".join(chunks).split() == expected_words


def test_quoted_sentences_pack_without_extra_period() -> None:
    chunks = chunk_sentences(segment_sentences('He said "Stop!" Then left.'), 8)
    assert chunks == ['He said "Stop!" Then left.']
