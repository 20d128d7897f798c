"""Unit tests for saved-lamina persistence."""

import json
import threading

import pytest

from lamina.core.errors import StorageDecodeError
from lamina.core.gallery_store import (
    SavedImageStore,
    add_saved_image,
    decode_saved_images,
    encode_saved_images,
    load_saved_images,
    partition_saved_images,
    remove_saved_image,
    save_saved_images,
)
from lamina.core.models import ArtifactStage, SavedImage


def _record(saved_at, image_type="normal"):
    return SavedImage(
        id=f"lamina-{saved_at}",
        type=image_type,
        image_base64=f"data-{saved_at}",
        saved_at=saved_at,
    )


class TestEncoding:
    """Tests for the JSON storage format."""

    def test_decode_storage_format(self):
        raw = json.dumps(
            [{"id": "lamina-1", "type": "improved", "imageBase64": "abc", "savedAt": 1}]
        )
        images = decode_saved_images(raw)
        assert images == [_record(1, "improved").model_copy(update={"image_base64": "abc"})]

    def test_encode_uses_storage_keys(self):
        data = json.loads(encode_saved_images([_record(7)]))
        assert data == [
            {"id": "lamina-7", "type": "normal", "imageBase64": "data-7", "savedAt": 7}
        ]

    def test_encode_then_decode_keeps_order(self):
        images = [_record(3), _record(1, "improved"), _record(2)]
        assert decode_saved_images(encode_saved_images(images)) == images

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            '{"id": "lamina-1"}',
            '[{"id": "lamina-1", "type": "normal"}]',
            '[{"id": "lamina-1", "type": "other", "imageBase64": "a", "savedAt": 1}]',
        ],
    )
    def test_invalid_text_raises(self, raw):
        with pytest.raises(StorageDecodeError):
            decode_saved_images(raw)


class TestLoadSave:
    """Tests for reading and writing the collection file."""

    def test_missing_file_is_empty(self, temp_dir):
        assert load_saved_images(temp_dir / "missing.json") == []

    def test_corrupt_file_is_empty(self, temp_dir):
        path = temp_dir / "saved.json"
        path.write_text("{corrupt", encoding="utf-8")
        assert load_saved_images(path) == []

    def test_save_then_load(self, temp_dir):
        path = temp_dir / "nested" / "saved.json"
        images = [_record(2, "improved"), _record(1)]

        save_saved_images(path, images)

        assert load_saved_images(path) == images

    def test_save_replaces_content(self, temp_dir):
        path = temp_dir / "saved.json"
        save_saved_images(path, [_record(1), _record(2)])
        save_saved_images(path, [_record(3)])
        assert load_saved_images(path) == [_record(3)]


class TestCollectionOperations:
    """Tests for the pure collection functions."""

    def test_add_prepends_with_time_based_id(self):
        images, record = add_saved_image([_record(1)], "abc", ArtifactStage.IMPROVED, now_ms=500)

        assert record.id == "lamina-500"
        assert record.type == "improved"
        assert record.saved_at == 500
        assert images[0] == record
        assert images[1] == _record(1)

    def test_add_accepts_string_type(self):
        _, record = add_saved_image([], "abc", "normal", now_ms=1)
        assert record.type == "normal"

    def test_add_does_not_mutate_input(self):
        original = [_record(1)]
        add_saved_image(original, "abc", "normal", now_ms=2)
        assert original == [_record(1)]

    def test_add_with_colliding_id_gets_suffix(self):
        images, first = add_saved_image([], "a", "normal", now_ms=42)
        images, second = add_saved_image(images, "b", "normal", now_ms=42)
        images, third = add_saved_image(images, "c", "improved", now_ms=42)

        assert [first.id, second.id, third.id] == ["lamina-42", "lamina-42-1", "lamina-42-2"]
        assert len({image.id for image in images}) == 3

    def test_add_uses_current_time(self):
        _, record = add_saved_image([], "a", "normal")
        assert record.saved_at > 1_600_000_000_000
        assert record.id == f"lamina-{record.saved_at}"

    def test_remove_exactly_one_preserving_order(self):
        images = [_record(5), _record(4), _record(3), _record(2)]

        remaining = remove_saved_image(images, "lamina-4")

        assert [image.id for image in remaining] == ["lamina-5", "lamina-3", "lamina-2"]

    def test_remove_unknown_id_is_noop(self):
        images = [_record(1)]
        assert remove_saved_image(images, "lamina-404") == images

    def test_partition_splits_by_type_newest_first(self):
        images = [
            _record(1, "normal"),
            _record(2, "improved"),
            _record(3, "normal"),
            _record(4, "improved"),
        ]

        normal, improved = partition_saved_images(images)

        assert [image.saved_at for image in normal] == [3, 1]
        assert [image.saved_at for image in improved] == [4, 2]

    def test_partition_empty(self):
        assert partition_saved_images([]) == ([], [])


class TestSavedImageStore:
    """Tests for SavedImageStore."""

    def test_load_missing_file(self, saved_store):
        assert saved_store.load() == []
        assert len(saved_store) == 0

    def test_add_persists(self, saved_store):
        record = saved_store.add("abc", ArtifactStage.NORMAL, now_ms=10)

        reloaded = SavedImageStore(saved_store.path)
        assert reloaded.load() == [record]

    def test_delete_persists(self, saved_store):
        first = saved_store.add("a", "normal", now_ms=1)
        saved_store.add("b", "improved", now_ms=2)

        assert saved_store.delete("lamina-2") is True

        reloaded = SavedImageStore(saved_store.path)
        assert reloaded.load() == [first]

    def test_delete_unknown_returns_false(self, saved_store):
        saved_store.add("a", "normal", now_ms=1)
        assert saved_store.delete("lamina-404") is False
        assert len(saved_store) == 1

    def test_get(self, saved_store):
        record = saved_store.add("a", "normal", now_ms=1)
        assert saved_store.get(record.id) == record
        assert saved_store.get("lamina-404") is None

    def test_images_is_a_copy(self, saved_store):
        saved_store.add("a", "normal", now_ms=1)
        saved_store.images.clear()
        assert len(saved_store) == 1

    def test_alternating_saves_partition(self, saved_store):
        for n in range(6):
            saved_store.add(f"img-{n}", "normal" if n % 2 == 0 else "improved", now_ms=n)

        normal, improved = saved_store.galleries()

        assert [image.saved_at for image in normal] == [4, 2, 0]
        assert [image.saved_at for image in improved] == [5, 3, 1]


class TestSharedCollectionFile:
    """Several stores (or sessions) writing the same collection file."""

    def test_saves_from_two_stores_both_survive(self, temp_dir):
        path = temp_dir / "saved.json"
        first = SavedImageStore(path)
        second = SavedImageStore(path)
        first.load()
        second.load()

        first.add("a", "normal", now_ms=1)
        second.add("b", "improved", now_ms=2)

        ids = [image.id for image in SavedImageStore(path).load()]
        assert sorted(ids) == ["lamina-1", "lamina-2"]
        assert [image.id for image in second.images] == ["lamina-2", "lamina-1"]

    def test_delete_keeps_records_saved_elsewhere(self, temp_dir):
        path = temp_dir / "saved.json"
        first = SavedImageStore(path)
        second = SavedImageStore(path)
        first.add("a", "normal", now_ms=1)
        second.load()
        first.add("b", "normal", now_ms=2)

        assert second.delete("lamina-1") is True

        assert [image.id for image in SavedImageStore(path).load()] == ["lamina-2"]

    def test_concurrent_saves_are_not_lost(self, temp_dir):
        path = temp_dir / "saved.json"
        stores = [SavedImageStore(path) for _ in range(4)]

        def save_many(store, offset):
            for n in range(10):
                store.add(f"img-{offset}-{n}", "normal", now_ms=offset * 100 + n)

        threads = [
            threading.Thread(target=save_many, args=(store, i)) for i, store in enumerate(stores)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert len(SavedImageStore(path).load()) == 40
