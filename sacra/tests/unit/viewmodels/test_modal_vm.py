from __future__ import annotations

import logging

import pytest

from sacra.domain.catalog import (
    ANALYTICS,
    CERTIFICATE,
    DETAIL,
    EDIT,
    ENTITY_HISTORY,
    ScreenCatalog,
)
from sacra.domain.entities import FocusContext, RecordRef
from sacra.domain.errors import UnknownCategoryError, UnknownOverlayError
from sacra.viewmodels.modal_vm import ModalCoordinator


def _record(record_id: str) -> RecordRef:
    return RecordRef(id=record_id, category="BAPTISM")


def test_open_is_idempotent() -> None:
    vm = ModalCoordinator()

    vm.open("BAPTISM")
    assert vm.is_open("BAPTISM") is True
    size = len(vm.open_ids)

    vm.open("BAPTISM")
    assert vm.is_open("BAPTISM") is True
    assert len(vm.open_ids) == size


def test_is_open_tracks_latest_call_per_overlay() -> None:
    vm = ModalCoordinator()

    vm.open(ANALYTICS)
    vm.open(DETAIL)
    vm.close(ANALYTICS)

    assert vm.is_open(ANALYTICS) is False
    assert vm.is_open(DETAIL) is True


def test_close_all_closes_everything_and_clears_focus() -> None:
    vm = ModalCoordinator()
    vm.open_detail(_record("r1"))
    vm.open_entity_history("member-9")
    vm.open("CONFIRMATION")

    vm.close_all()

    assert all(not vm.is_open(overlay) for overlay in vm.catalog.overlays)
    assert vm.focus == FocusContext()


def test_open_certificate_sets_focus_then_close_clears_it() -> None:
    vm = ModalCoordinator()

    vm.open_certificate(RecordRef(id="r1"))
    assert vm.is_open(CERTIFICATE) is True
    assert vm.selected_record.id == "r1"

    vm.close(CERTIFICATE)
    assert vm.is_open(CERTIFICATE) is False
    assert vm.selected_record is None


def test_open_edit_overwrites_focus_and_close_edit_clears() -> None:
    vm = ModalCoordinator()
    r1, r2 = _record("r1"), _record("r2")

    vm.open_certificate(r1)
    vm.open_edit(r2)
    assert vm.selected_record == r2

    vm.close(EDIT)
    assert vm.selected_record is None


def test_close_certificate_clears_record_set_by_edit() -> None:
    vm = ModalCoordinator()

    vm.open_certificate(_record("r1"))
    vm.open_edit(_record("r2"))
    vm.close(CERTIFICATE)

    assert vm.selected_record is None
    assert vm.is_open(EDIT) is True


def test_closing_history_keeps_selected_record() -> None:
    vm = ModalCoordinator()
    vm.open_detail(_record("r1"))
    vm.open_entity_history("member-1")

    vm.close(ENTITY_HISTORY)

    assert vm.selected_entity_id is None
    assert vm.selected_record == _record("r1")


def test_closing_record_overlay_keeps_entity_id() -> None:
    vm = ModalCoordinator()
    vm.open_entity_history("member-1")
    vm.open_detail(_record("r1"))

    vm.close(DETAIL)

    assert vm.selected_entity_id == "member-1"


def test_closing_unrelated_overlay_leaves_focus() -> None:
    vm = ModalCoordinator()
    vm.open_detail(_record("r1"))
    vm.open_entity_history("member-1")
    vm.open(ANALYTICS)

    vm.close(ANALYTICS)
    vm.close("BAPTISM")

    assert vm.focus == FocusContext(_record("r1"), "member-1")


def test_composite_helper_sets_focus_before_opening() -> None:
    seen = []

    def on_change(vm: ModalCoordinator) -> None:
        if vm.is_open(DETAIL):
            seen.append(vm.selected_record)

    vm = ModalCoordinator(on_change=on_change)
    vm.open_detail(_record("r7"))

    assert seen == [_record("r7")]


def test_open_create_validates_category() -> None:
    vm = ModalCoordinator()

    vm.open_create("MATRIMONY")
    assert vm.is_open("MATRIMONY") is True

    with pytest.raises(UnknownCategoryError):
        vm.open_create(DETAIL)


def test_unknown_overlay_is_a_caller_error() -> None:
    vm = ModalCoordinator()

    with pytest.raises(UnknownOverlayError):
        vm.open("SETTINGS")
    with pytest.raises(UnknownOverlayError):
        vm.is_open("SETTINGS")


def test_generic_catalog_without_history_overlay() -> None:
    catalog = ScreenCatalog(
        categories=("INVOICE",),
        entity_focus_overlay=None,
        auxiliary_overlays=(),
    )
    vm = ModalCoordinator(catalog)

    vm.open_detail(RecordRef(id="inv-1"))
    assert vm.is_open(DETAIL) is True
    with pytest.raises(UnknownOverlayError):
        vm.open_entity_history("x")
    assert vm.selected_entity_id is None


def test_on_change_not_fired_for_noop_open() -> None:
    calls = []
    vm = ModalCoordinator(on_change=lambda _vm: calls.append(1))

    vm.open(ANALYTICS)
    vm.open(ANALYTICS)

    assert calls == [1]


def test_failing_on_change_is_logged_and_state_still_applies(caplog) -> None:
    def on_change(_vm: ModalCoordinator) -> None:
        raise RuntimeError("view gone")

    vm = ModalCoordinator(on_change=on_change)

    with caplog.at_level(logging.WARNING):
        vm.open_detail(_record("r3"))
        vm.close(DETAIL)

    assert vm.is_open(DETAIL) is False
    assert vm.selected_record is None
    assert "Overlay on_change callback failed" in caplog.text
