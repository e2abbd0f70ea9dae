"""Tests for the progress validator and content registry lookups."""
from faker import Faker

from conftest import make_item
from vocasync.services.content_registry import ContentRegistry, chunked
from vocasync.services.progress_validator import ProgressValidator

fake = Faker()


def test_filter_valid_drops_unknown_words(db, words, user_id):
    validator = ProgressValidator(ContentRegistry(db))
    items = [
        make_item(words[0].id),
        make_item(fake.uuid4()),
        make_item(words[1].id),
    ]

    valid = validator.filter_valid(user_id, items)

    assert [item.word_id for item in valid] == [words[0].id, words[1].id]


def test_filter_valid_keeps_duplicates_and_order(db, words, user_id):
    validator = ProgressValidator(ContentRegistry(db))
    items = [make_item(words[1].id), make_item(words[0].id), make_item(words[1].id, review_level=2)]

    valid = validator.filter_valid(user_id, items)

    assert [item.word_id for item in valid] == [words[1].id, words[0].id, words[1].id]


def test_filter_valid_uses_one_batched_lookup(mocker, user_id):
    registry = mocker.Mock(spec=ContentRegistry)
    registry.existing_word_ids.return_value = {"a", "b"}
    validator = ProgressValidator(registry)

    valid = validator.filter_valid(user_id, [make_item("a"), make_item("b"), make_item("c"), make_item("a")])

    assert len(valid) == 3
    registry.existing_word_ids.assert_called_once()
    assert sorted(registry.existing_word_ids.call_args.args[0]) == ["a", "a", "b", "c"]


def test_filter_valid_empty_batch(mocker, user_id):
    registry = mocker.Mock(spec=ContentRegistry)
    validator = ProgressValidator(registry)

    assert validator.filter_valid(user_id, []) == []
    registry.existing_word_ids.assert_not_called()


def test_existing_word_ids_respects_chunk_size(db, make_word):
    created = [make_word() for _ in range(5)]
    registry = ContentRegistry(db, chunk_size=2)

    found = registry.existing_word_ids([word.id for word in created] + [fake.uuid4()])

    assert found == {word.id for word in created}


def test_get_contents_orders_quiz_items(db, make_word):
    word = make_word(quiz_count=3, text="안녕하세요", translation="Xin chào", hanja=None)
    registry = ContentRegistry(db)

    contents = registry.get_contents([word.id])

    content = contents[word.id]
    assert content.text == "안녕하세요"
    assert content.translation == "Xin chào"
    assert [quiz.question for quiz in content.quiz] == [
        f"Question {position} about 안녕하세요?" for position in range(3)
    ]
    assert all(len(quiz.options) == 3 for quiz in content.quiz)


def test_get_contents_empty(db):
    assert ContentRegistry(db).get_contents([]) == {}


def test_chunked():
    assert list(chunked(["a", "b", "c", "d", "e"], 2)) == [["a", "b"], ["c", "d"], ["e"]]
    assert list(chunked([], 3)) == []
