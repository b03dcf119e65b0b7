from __future__ import annotations

import pytest

from pyopenmap.lifecycle import TimelineLifecycleAdapter
from pyopenmap.state.instance import InstancePhase
from tests.fakes import FakeEngine, FakeGeocodeTransport, settle

ICON = "http://example.com/pin.png"


@pytest.fixture()
def adapter() -> TimelineLifecycleAdapter:
    return TimelineLifecycleAdapter()


@pytest.mark.asyncio
async def test_enter_before_engine_ready_reveals_once_ready(
    make_controller, adapter: TimelineLifecycleAdapter, engine: FakeEngine
) -> None:
    engine.hold = True
    controller, manager = make_controller(lat=1, lng=2)
    adapter.register(controller, manager)

    task = adapter.on_enter(controller.state.instance_id)
    await settle()
    assert controller.state.surface is None
    assert controller.state.phase is InstancePhase.AWAITING_ENGINE

    engine.release()
    await task

    assert controller.state.surface.visible is True
    assert controller.state.phase is InstancePhase.VISIBLE


@pytest.mark.asyncio
async def test_exit_before_creation_is_safe_and_cancels_pending_reveal(
    make_controller, adapter: TimelineLifecycleAdapter, engine: FakeEngine
) -> None:
    engine.hold = True
    controller, manager = make_controller(lat=1, lng=2)
    adapter.register(controller, manager)

    adapter.on_enter(controller.state.instance_id)
    await settle()
    adapter.on_exit(controller.state.instance_id)

    engine.release()
    await adapter.wait_idle()

    surface = controller.state.surface
    assert surface is not None
    assert surface.visible is False
    assert surface.center_calls == []


@pytest.mark.asyncio
async def test_reentry_during_load_reveals_once(
    make_controller, adapter: TimelineLifecycleAdapter, engine: FakeEngine
) -> None:
    engine.hold = True
    controller, manager = make_controller(lat=1, lng=2)
    adapter.register(controller, manager)
    instance_id = controller.state.instance_id

    adapter.on_enter(instance_id)
    adapter.on_exit(instance_id)
    adapter.on_enter(instance_id)
    engine.release()
    await adapter.wait_idle()

    surface = controller.state.surface
    assert surface.visible is True
    assert surface.visibility_calls == [False, True]
    assert len(engine.surfaces) == 1


@pytest.mark.asyncio
async def test_markers_attached_on_first_reveal_only(
    make_controller, adapter: TimelineLifecycleAdapter, engine: FakeEngine
) -> None:
    controller, manager = make_controller(lat=1, lng=2, markers=[{"icon": ICON, "text": "A", "lat": 3, "lng": 4}])
    adapter.register(controller, manager)
    instance_id = controller.state.instance_id

    for _ in range(3):
        await adapter.on_enter(instance_id)
        adapter.on_exit(instance_id)

    surface = engine.surfaces[0]
    assert len(surface.point_layers) == 1
    assert len(surface.point_layers[0].features) == 1
    assert len(surface.controls) == 1
    assert surface.visible is False
    assert manager.layer is controller.state.marker_layer


@pytest.mark.asyncio
async def test_no_marker_layer_without_markers(
    make_controller, adapter: TimelineLifecycleAdapter, engine: FakeEngine
) -> None:
    controller, manager = make_controller(lat=1, lng=2)
    adapter.register(controller, manager)

    await adapter.on_enter(controller.state.instance_id)

    assert engine.surfaces[0].point_layers == []
    assert controller.state.marker_layer is None


@pytest.mark.asyncio
async def test_engine_failure_does_not_reach_host(
    make_controller, adapter: TimelineLifecycleAdapter, engine: FakeEngine
) -> None:
    engine.fail_with = RuntimeError("blocked")
    controller, manager = make_controller(lat=1, lng=2)
    adapter.register(controller, manager)

    task = adapter.on_enter(controller.state.instance_id)
    await task
    adapter.on_exit(controller.state.instance_id)

    assert task.exception() is None
    assert controller.state.phase is InstancePhase.FAILED


@pytest.mark.asyncio
async def test_unknown_instance_is_logged(
    adapter: TimelineLifecycleAdapter, caplog: pytest.LogCaptureFixture
) -> None:
    assert adapter.on_enter("actualmap404") is None
    adapter.on_exit("actualmap404")

    assert "unknown map instance" in caplog.text


@pytest.mark.asyncio
async def test_no_geocoding_is_repeated_across_seeks(
    make_controller, adapter: TimelineLifecycleAdapter, transport: FakeGeocodeTransport
) -> None:
    controller, manager = make_controller(location="Toronto", markers=[{"icon": ICON, "location": "Paris"}])
    adapter.register(controller, manager)
    instance_id = controller.state.instance_id

    for _ in range(4):
        await adapter.on_enter(instance_id)
        adapter.on_exit(instance_id)
    await settle()

    assert sorted(transport.calls) == ["Paris", "Toronto"]
