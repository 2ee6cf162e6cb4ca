from __future__ import annotations

from captionsync.services.segmenter import ends_sentence, segment_sentences


def test_splits_on_terminal_punctuation_runs() -> None:
    sentences = list(segment_sentences("Wait?! Really... Yes. Fine!"))
    assert sentences == ["Wait?!", "Really...", "Yes.", "Fine!"]


def test_text_without_punctuation_is_one_sentence() -> None:
    assert list(segment_sentences("no punctuation here")) == ["no punctuation here"]


def test_discards_empty_fragments() -> None:
    assert list(segment_sentences("Hello. ... !! World")) == ["Hello.", "World"]
    assert list(segment_sentences("")) == []
    assert list(segment_sentences("?!.")) == []


def test_sequence_is_restartable() -> None:
    sentences = segment_sentences("One. Two. Three.")
    first = list(sentences)
    second = list(sentences)
    assert first == second == ["One.", "Two.", "Three."]


def test_ends_sentence() -> None:
    assert ends_sentence("Hello world.")
    assert ends_sentence("Really?! ")
    assert not ends_sentence("Hello world")


def test_closing_quote_stays_with_its_sentence() -> None:
    sentences = list(segment_sentences('He said "Stop!" Then left... ok'))
    assert sentences == ['He said "Stop!"', "Then left...", "ok"]
    assert list(segment_sentences("She whispered 'go.' He went.")) == ["She whispered 'go.'", "He went."]


def test_ends_sentence_looks_past_closing_quotes() -> None:
    assert ends_sentence('He said "Stop!"')
    assert not ends_sentence('He said "Stop"')
