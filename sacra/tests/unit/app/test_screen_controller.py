from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from sacra.adapters.records_mock import RecordsMock
from sacra.app.screen_controller import SacramentsScreenController
from sacra.domain.catalog import (
    ANALYTICS,
    CERTIFICATE,
    DELETE_CONFIRM,
    DETAIL,
    EDIT,
    ENTITY_HISTORY,
    EXPORT,
    ScreenCatalog,
)
from sacra.domain.entities import RecordRef
from sacra.domain.errors import UnknownCategoryError


def _record(record_id: str = "r1", category: str = "BAPTISM") -> RecordRef:
    return RecordRef(id=record_id, category=category)


def test_peers_share_catalog_but_not_state() -> None:
    catalog = ScreenCatalog.for_categories(["A", "B"])
    controller = SacramentsScreenController(catalog)

    assert controller.modals.catalog is catalog
    assert controller.loading.catalog is catalog
    assert controller.refresh.catalog is catalog


def test_overlay_intents_route_to_modal_coordinator() -> None:
    controller = SacramentsScreenController()
    record = _record()

    controller.view_record(record)
    controller.show_history("member-3")
    controller.show_analytics()
    controller.start_create("CONFIRMATION")

    assert controller.is_open(DETAIL)
    assert controller.is_open(ENTITY_HISTORY)
    assert controller.is_open(ANALYTICS)
    assert controller.is_open("CONFIRMATION")
    assert controller.modals.selected_record == record
    assert controller.modals.selected_entity_id == "member-3"


def test_submit_create_success_closes_overlay_and_refreshes_category() -> None:
    controller = SacramentsScreenController()
    refetch = MagicMock()
    other = MagicMock()
    controller.refresh.register("BAPTISM", refetch)
    controller.refresh.register("MATRIMONY", other)
    controller.start_create("BAPTISM")
    observed = []

    async def mutation() -> str:
        observed.append(
            (
                controller.loading.is_loading("create"),
                controller.loading.is_loading("BAPTISM"),
                controller.is_operation_loading("create BAPTISM"),
            )
        )
        return "new-id"

    result = asyncio.run(controller.submit_create("BAPTISM", mutation))

    assert result == "new-id"
    assert observed == [(True, True, True)]
    assert controller.is_open("BAPTISM") is False
    assert controller.is_any_loading() is False
    refetch.assert_called_once_with()
    other.assert_not_called()


def test_failed_mutation_leaves_overlay_open_and_list_stale() -> None:
    controller = SacramentsScreenController()
    refetch = MagicMock()
    controller.refresh.register("BAPTISM", refetch)
    controller.start_create("BAPTISM")

    async def mutation() -> None:
        raise RuntimeError("validation failed")

    with pytest.raises(RuntimeError, match="validation failed"):
        asyncio.run(controller.submit_create("BAPTISM", mutation))

    assert controller.is_open("BAPTISM") is True
    assert controller.is_any_loading() is False
    refetch.assert_not_called()


def test_submit_create_rejects_unknown_category() -> None:
    controller = SacramentsScreenController()

    with pytest.raises(UnknownCategoryError):
        asyncio.run(controller.submit_create("FUNERAL", MagicMock()))


def test_submit_edit_uses_focused_record() -> None:
    controller = SacramentsScreenController()
    refetch = MagicMock()
    controller.refresh.register("CONFIRMATION", refetch)
    record = _record("c-1", "CONFIRMATION")
    controller.edit_record(record)
    seen = []

    def mutation() -> bool:
        seen.append(controller.loading.state("edit").record_id)
        return True

    assert asyncio.run(controller.submit_edit(mutation)) is True

    assert seen == ["c-1"]
    assert controller.is_open(EDIT) is False
    assert controller.modals.selected_record is None
    refetch.assert_called_once_with()


def test_submit_edit_without_focus_raises() -> None:
    controller = SacramentsScreenController()

    with pytest.raises(RuntimeError):
        asyncio.run(controller.submit_edit(MagicMock()))


def test_delete_flow_closes_confirm_and_detail() -> None:
    controller = SacramentsScreenController()
    source = RecordsMock.with_rows(["BAPTISM"], per_category=2)
    lst = controller.list_controller("BAPTISM", source)
    lst.mount()
    target = lst.records[0]
    controller.view_record(target)
    controller.confirm_delete(target)

    deleted = asyncio.run(controller.delete_record(lambda: source.delete_record(target.id)))

    assert deleted is True
    assert controller.pending_delete is None
    assert controller.is_open(DELETE_CONFIRM) is False
    assert controller.is_open(DETAIL) is False
    assert [rec.id for rec in lst.records] == ["baptism-2"]


def test_delete_without_pending_record_raises() -> None:
    controller = SacramentsScreenController()

    with pytest.raises(RuntimeError):
        asyncio.run(controller.delete_record(MagicMock()))


def test_cancel_delete_clears_pending_record() -> None:
    controller = SacramentsScreenController()
    controller.confirm_delete(_record())

    controller.cancel_delete()

    assert controller.pending_delete is None
    assert controller.is_open(DELETE_CONFIRM) is False


def test_generate_certificate_keeps_overlay_open() -> None:
    controller = SacramentsScreenController()
    refetch = MagicMock()
    controller.refresh.register("BAPTISM", refetch)
    controller.show_certificate(_record())

    url = asyncio.run(controller.generate_certificate(lambda: "https://cdn/cert.pdf"))

    assert url == "https://cdn/cert.pdf"
    assert controller.is_open(CERTIFICATE) is True
    assert controller.modals.selected_record == _record()
    refetch.assert_called_once_with()


def test_export_closes_export_overlay_without_refresh() -> None:
    controller = SacramentsScreenController()
    refetch = MagicMock()
    controller.refresh.register("BAPTISM", refetch)
    controller.start_export()
    busy = []

    async def exporter() -> int:
        busy.append(controller.is_operation_loading("export"))
        return 12

    assert asyncio.run(controller.export_records(exporter)) == 12

    assert busy == [True]
    assert controller.is_open(EXPORT) is False
    refetch.assert_not_called()


def test_record_without_category_refreshes_everything() -> None:
    controller = SacramentsScreenController(ScreenCatalog.for_categories(["A", "B"]))
    cb_a, cb_b = MagicMock(), MagicMock()
    controller.refresh.register("A", cb_a)
    controller.refresh.register("B", cb_b)
    controller.edit_record(RecordRef(id="x"))

    asyncio.run(controller.submit_edit(lambda: None))

    cb_a.assert_called_once_with()
    cb_b.assert_called_once_with()


def test_refresh_everything_tracks_global_scope() -> None:
    controller = SacramentsScreenController(ScreenCatalog.for_categories(["A", "B"]))
    during = []
    controller.refresh.register("A", lambda: during.append(controller.loading.is_loading("GLOBAL")))
    controller.refresh.register("B", MagicMock(side_effect=RuntimeError("down")))

    results = asyncio.run(controller.refresh_everything())

    assert results == {"A": True, "B": False}
    assert during == [True]
    assert controller.is_any_loading() is False


def test_reset_and_dispose() -> None:
    controller = SacramentsScreenController()
    controller.refresh.register("BAPTISM", MagicMock())
    controller.view_record(_record())
    controller.loading.set_loading("GLOBAL", True)

    controller.reset()
    assert controller.modals.open_ids == frozenset()
    assert controller.is_any_loading() is False
    assert controller.refresh.registered() == ("BAPTISM",)

    controller.dispose()
    assert controller.refresh.registered() == ()


def test_workflows_await_async_refresh_callbacks() -> None:
    controller = SacramentsScreenController()
    calls = []

    async def reload() -> None:
        await asyncio.sleep(0)
        calls.append("BAPTISM")

    controller.refresh.register("BAPTISM", reload)
    record = _record()

    async def _flow() -> None:
        controller.start_create("BAPTISM")
        await controller.submit_create("BAPTISM", lambda: "new")
        controller.edit_record(record)
        await controller.submit_edit(lambda: True)
        controller.show_certificate(record)
        await controller.generate_certificate(lambda: "https://cdn/cert.pdf")
        controller.confirm_delete(record)
        await controller.delete_record(lambda: True)

    asyncio.run(_flow())

    assert calls == ["BAPTISM"] * 4
