"""
Metabox Panel -- Save Tests

Drives MetaBox.save against MemoryMetaStorage and checks the storage
calls it makes.

Flat mode: each field is stored under its own name.
Serialize mode: all fields share the "prefix + id" composite record, and
each field re-reads it so earlier writes are visible to later fields.
"""

import logging

import pytest

from metabox.kernel.types import Delete, Persist


# ============================================================================
# Flat mode
# ============================================================================


class TestFlatSave:
    @pytest.fixture
    def box(self, flat_box, storage):
        flat_box.add_text_field("color", default="red")
        storage.records[7] = {"color": "blue"}
        return flat_box

    def test_default_value_deletes(self, box, storage, make_request):
        """Submitting the default on an update removes the record."""
        result = box.save(7, make_request({"mb_details[color]": "red"}), is_update=True)

        assert storage.writes("delete") == [("delete", 7, "color")]
        assert storage.writes("set") == []
        assert result.actions == [("color", Delete())]
        assert "color" not in storage.records[7]

    def test_other_value_sets(self, box, storage, make_request):
        result = box.save(7, make_request({"mb_details[color]": "green"}), is_update=True)

        assert storage.writes("set") == [("set", 7, "color", "green")]
        assert storage.writes("delete") == []
        assert result.actions == [("color", Persist("green"))]
        assert storage.get(7, "color") == "green"

    def test_new_item_untouched_field_deleted(self, box, storage, make_request):
        box.add_text_field("note")
        box.save(8, make_request({"mb_details[note]": "hi"}), is_update=False)
        assert storage.writes("delete") == [("delete", 8, "color")]

    def test_new_item_with_value_set(self, box, storage, make_request):
        box.save(8, make_request({"mb_details[color]": "green"}), is_update=False)
        assert storage.get(8, "color") == "green"

    def test_fields_saved_in_registration_order(self, flat_box, storage, make_request):
        flat_box.add_text_field("first")
        flat_box.add_text_field("second")
        payload = {"mb_details[second]": "2", "mb_details[first]": "1"}

        flat_box.save(1, make_request(payload), is_update=True)

        assert [call[2] for call in storage.calls] == ["first", "second"]

    def test_multiple_select_stores_list(self, flat_box, storage, make_request):
        flat_box.add_select_field("tags", {"a": "A", "b": "B", "c": "C"}, multiple=True, save_default=False)

        flat_box.save(1, make_request({"mb_details[tags][]": ["a", "c"]}), is_update=True)

        assert storage.get(1, "tags") == ["a", "c"]

    def test_multiple_select_cleared(self, flat_box, storage, make_request):
        flat_box.add_select_field("tags", {"a": "A"}, multiple=True, save_default=False)
        flat_box.add_text_field("note")
        storage.records[1] = {"tags": ["a"]}

        flat_box.save(1, make_request({"mb_details[note]": "x"}), is_update=True)

        assert storage.get(1, "tags") is None

    def test_checkbox_round_trip(self, flat_box, storage, make_request):
        flat_box.add_checkbox_field("featured")
        flat_box.add_text_field("note")

        flat_box.save(1, make_request({"mb_details[featured]": "on"}), is_update=True)
        assert storage.get(1, "featured") == "on"

        flat_box.save(1, make_request({"mb_details[note]": "x"}), is_update=True)
        assert storage.get(1, "featured") is None

    def test_select_saves_default_when_asked(self, flat_box, storage, make_request):
        flat_box.add_select_field("size", {"s": "Small", "m": "Medium"})

        flat_box.save(1, make_request({"mb_details[size]": "s"}), is_update=True)

        assert storage.get(1, "size") == "s"

    def test_panel_key_not_used(self, box, storage, make_request):
        box.save(7, make_request({"mb_details[color]": "green"}), is_update=True)
        assert "mb_details" not in storage.records[7]


# ============================================================================
# Serialize mode
# ============================================================================


class TestSerializedSave:
    @pytest.fixture
    def box(self, serialize_box):
        serialize_box.add_text_field("color", default="red")
        serialize_box.add_select_field("size", {"s": "Small", "m": "Medium"})
        return serialize_box

    def test_two_writes_per_stored_field(self, box, storage, make_request):
        storage.records[7] = {"mb_details": {"color": "blue"}}
        payload = {"mb_details[color]": "green", "mb_details[size]": "m"}

        box.save(7, make_request(payload), is_update=True)

        assert storage.writes("set") == [
            ("set", 7, "mb_details", {}),
            ("set", 7, "mb_details", {"color": "green"}),
            ("set", 7, "mb_details", {"color": "green", "size": "m"}),
        ]
        assert storage.writes("delete") == []

    def test_final_composite(self, box, storage, make_request):
        storage.records[7] = {"mb_details": {"color": "blue", "size": "s"}}

        box.save(7, make_request({"mb_details[color]": " teal ", "mb_details[size]": "m"}), is_update=True)

        assert storage.get(7, "mb_details") == {"color": "teal", "size": "m"}

    def test_empty_value_removes_key(self, box, storage, make_request):
        storage.records[7] = {"mb_details": {"color": "blue", "size": "s"}}

        box.save(7, make_request({"mb_details[size]": "s"}), is_update=True)

        assert storage.get(7, "mb_details") == {"size": "s"}

    def test_nothing_to_write(self, box, storage, make_request):
        result = box.save(7, make_request({"mb_details[color]": "  "}), is_update=True)

        assert storage.calls == []
        assert result.actions == []
        assert result.skipped is False

    def test_corrupt_composite_replaced(self, box, storage, make_request):
        storage.records[7] = {"mb_details": "not a mapping"}

        box.save(7, make_request({"mb_details[color]": "green"}), is_update=True)

        assert storage.get(7, "mb_details") == {"color": "green"}

    def test_other_keys_untouched(self, box, storage, make_request):
        storage.records[7] = {"mb_details": {"legacy": "keep"}, "unrelated": "x"}

        box.save(7, make_request({"mb_details[color]": "green"}), is_update=True)

        assert storage.get(7, "mb_details") == {"legacy": "keep", "color": "green"}
        assert storage.get(7, "unrelated") == "x"

    def test_actions_recorded_against_panel_key(self, box, storage, make_request):
        result = box.save(7, make_request({"mb_details[color]": "green"}), is_update=True)
        assert result.actions == [("mb_details", Persist({"color": "green"}))]


# ============================================================================
# Requests that never carried the panel
# ============================================================================


class TestWithoutPanelPayload:
    """
    A save from a form that never drew the panel (quick edit, an API save)
    carries no "mb_details[...]" keys and must leave stored values alone.
    """

    @pytest.fixture(params=["flat", "serialize"])
    def box(self, request, flat_box, serialize_box):
        box = flat_box if request.param == "flat" else serialize_box
        box.add_text_field("color", default="red")
        box.add_select_field("size", {"s": "Small", "m": "Medium"})
        box.add_checkbox_field("featured")
        return box

    @pytest.fixture
    def stored(self, box, storage):
        if box.config.serialize:
            storage.records[7] = {"mb_details": {"color": "blue", "size": "m", "featured": "on"}}
        else:
            storage.records[7] = {"color": "blue", "size": "m", "featured": "on"}
        return storage.records[7]

    def test_unrelated_fields_touch_nothing(self, box, storage, stored, make_request):
        before = dict(stored)

        result = box.save(7, make_request({"post_title": "x"}), is_update=True)

        assert storage.calls == []
        assert storage.records[7] == before
        assert result.skipped is True
        assert result.reason == "no_payload"
        assert result.actions == []

    def test_empty_payload_touches_nothing(self, box, storage, stored, make_request):
        result = box.save(7, make_request({}), is_update=True)

        assert storage.calls == []
        assert result.reason == "no_payload"

    def test_new_item_touches_nothing(self, box, storage, make_request):
        result = box.save(8, make_request({"post_title": "x"}), is_update=False)

        assert storage.calls == []
        assert result.skipped is True

    def test_nonce_alone_is_not_panel_payload(self, box, storage, stored, make_request):
        result = box.save(7, make_request({"mb_details_nonce": "abc"}), is_update=True)

        assert storage.calls == []
        assert result.reason == "no_payload"

    def test_similar_prefix_is_not_panel_payload(self, box, storage, stored, make_request):
        result = box.save(7, make_request({"mb_details_extra[color]": "green"}), is_update=True)

        assert storage.calls == []
        assert result.reason == "no_payload"

    def test_one_panel_key_runs_every_field(self, box, storage, stored, make_request):
        result = box.save(7, make_request({"mb_details[color]": "green"}), is_update=True)

        assert result.skipped is False
        assert storage.calls != []
        if box.config.serialize:
            assert storage.get(7, "mb_details") == {"color": "green"}
        else:
            assert storage.get(7, "color") == "green"
            assert storage.get(7, "featured") is None

    def test_skip_is_logged(self, box, stored, make_request, caplog):
        with caplog.at_level(logging.INFO, logger="metabox.kernel.panel"):
            box.save(7, make_request({"post_title": "x"}), is_update=True)

        assert "no_payload" in caplog.text
