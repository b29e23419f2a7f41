"""
Tests for the database layer.

Covers:
- Accessors fail before the engine is initialized
- UUIDString normalisation
- session_scope commit and rollback
- TrackedBase.touch
"""

from uuid import UUID, uuid4

import pytest
from sqlalchemy import select

from inventory_kernel.db.base import UUIDString
from inventory_kernel.db.engine import get_engine, get_session_factory, session_scope
from inventory_modules.assets.orm import LocationModel


class TestUninitialized:

    def test_get_engine_raises(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            get_engine()

    def test_get_session_factory_raises(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            get_session_factory()


class TestUUIDString:

    def test_string_input_is_canonicalised(self):
        value = uuid4()

        bound = UUIDString().process_bind_param(str(value).upper(), None)

        assert bound == str(value)

    def test_none_passes_through(self):
        assert UUIDString().process_bind_param(None, None) is None
        assert UUIDString().process_result_value(None, None) is None

    def test_loads_uuid(self):
        value = uuid4()

        assert UUIDString().process_result_value(str(value), None) == value


class TestSessionScope:

    def test_commits_on_success(self, db_engine, test_actor_id):
        with session_scope() as sess:
            sess.add(LocationModel(code="009", name="Arsip", created_by_id=test_actor_id))

        with session_scope() as sess:
            codes = sess.scalars(select(LocationModel.code)).all()

        assert codes == ["009"]

    def test_rolls_back_on_error(self, db_engine, test_actor_id):
        with pytest.raises(ValueError):
            with session_scope() as sess:
                sess.add(LocationModel(code="009", name="Arsip", created_by_id=test_actor_id))
                sess.flush()
                raise ValueError("boom")

        with session_scope() as sess:
            assert sess.scalars(select(LocationModel)).all() == []


class TestTouch:

    def test_records_editor(self, location, session):
        editor = uuid4()

        location.touch(editor)
        session.commit()

        assert isinstance(location.updated_by_id, UUID)
        assert location.updated_by_id == editor

    def test_none_keeps_previous_editor(self, location):
        editor = uuid4()
        location.touch(editor)

        location.touch(None)

        assert location.updated_by_id == editor
