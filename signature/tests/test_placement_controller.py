"""Placement state machine: Idle -> Positioning -> Positioned -> applied."""
from __future__ import annotations

from dataclasses import replace

import pytest

from documents.models.document_models import MetadataOnly
from signature.exceptions.errors import InputError, RenderError, ValidationError
from signature.logic.placement_controller import DEFAULT_POSITION, PlacementController
from signature.models.signature_enums import PlacementMode
from signature.models.signature_placement import Position, SurfaceRect

SURFACE = SurfaceRect(left=0, top=0, width=200, height=100)


@pytest.fixture
def controller(composer):
    return PlacementController(composer)


def _positioned(controller, signature):
    controller.select_signature(signature)
    controller.start_positioning()
    controller.click(60, 60, SURFACE)


def test_starts_idle_at_default_position(controller) -> None:
    assert controller.mode is PlacementMode.IDLE
    assert controller.position == Position(50, 80)
    assert not controller.prompt_visible
    assert controller.preview() is None


def test_start_positioning_requires_selection(controller) -> None:
    with pytest.raises(ValidationError):
        controller.start_positioning()
    assert controller.mode is PlacementMode.IDLE


def test_prompt_only_while_positioning(controller, signature) -> None:
    controller.select_signature(signature)
    controller.start_positioning()
    assert controller.mode is PlacementMode.POSITIONING
    assert controller.prompt_visible
    controller.click(60, 60, SURFACE)
    assert not controller.prompt_visible


def test_click_normalizes_to_percent(controller, signature) -> None:
    _positioned(controller, signature)
    assert controller.mode is PlacementMode.POSITIONED
    assert controller.position == Position(30, 60)


def test_click_relative_to_surface_origin(controller, signature) -> None:
    controller.select_signature(signature)
    controller.start_positioning()
    controller.click(150, 70, SurfaceRect(left=100, top=20, width=100, height=200))
    assert controller.position == Position(50, 25)


def test_click_outside_surface_is_ignored(controller, signature) -> None:
    controller.select_signature(signature)
    controller.start_positioning()
    assert controller.click(-40, 500, SURFACE) is False
    assert controller.click(201, 50, SURFACE) is False
    assert controller.mode is PlacementMode.POSITIONING
    assert controller.position == DEFAULT_POSITION


def test_click_on_surface_edge_is_accepted(controller, signature) -> None:
    controller.select_signature(signature)
    controller.start_positioning()
    assert controller.click(200, 100, SURFACE) is True
    assert controller.position == Position(100, 100)


def test_click_ignored_unless_positioning(controller, signature) -> None:
    controller.select_signature(signature)
    assert controller.click(10, 10, SURFACE) is False
    assert controller.mode is PlacementMode.IDLE
    assert controller.position == DEFAULT_POSITION


def test_zero_size_surface_rejected(controller, signature) -> None:
    controller.select_signature(signature)
    controller.start_positioning()
    with pytest.raises(ValidationError):
        controller.click(1, 1, SurfaceRect(0, 0, 0, 100))
    assert controller.mode is PlacementMode.POSITIONING


def test_preview_is_dashed_current_selection(controller, signature, capture) -> None:
    _positioned(controller, signature)
    preview = controller.preview()
    assert preview.dashed
    assert preview.signature_id == signature.id
    assert preview.position == Position(30, 60)

    capture.begin_stroke((5, 5))
    capture.end_stroke()
    other = capture.save("John")
    controller.select_signature(other)
    assert controller.preview().signature_id == other.id


def test_reposition_goes_back_to_positioning(controller, signature) -> None:
    _positioned(controller, signature)
    controller.reposition()
    assert controller.mode is PlacementMode.POSITIONING
    controller.click(100, 50, SURFACE)
    assert controller.position == Position(50, 50)


def test_apply_requires_positioned(controller, signature, document, store) -> None:
    controller.select_signature(signature)
    controller.start_positioning()
    with pytest.raises(ValidationError):
        controller.apply(document)
    assert not controller.applied
    assert store.load_history() == []


def test_apply_without_document_keeps_state(controller, signature, store) -> None:
    _positioned(controller, signature)
    with pytest.raises(InputError):
        controller.apply(None)
    assert controller.mode is PlacementMode.POSITIONED
    assert not controller.applied
    assert store.load_history() == []


def test_apply_metadata_only_document_rejected(controller, signature, document) -> None:
    _positioned(controller, signature)
    with pytest.raises(InputError):
        controller.apply(replace(document, payload=MetadataOnly()))
    assert controller.mode is PlacementMode.POSITIONED


def test_apply_with_broken_image_is_retryable(controller, signature, document) -> None:
    broken = replace(signature, image_data="data:image/png;base64,AAAA")
    _positioned(controller, broken)
    with pytest.raises(RenderError):
        controller.apply(document)
    assert controller.mode is PlacementMode.POSITIONED
    controller.select_signature(signature)
    assert controller.apply(document).data


def test_apply_success_then_locked_until_reset(controller, signature, document) -> None:
    _positioned(controller, signature)
    artifact = controller.apply(document)
    assert controller.applied
    assert controller.artifact is artifact
    assert controller.preview() is None
    with pytest.raises(ValidationError):
        controller.apply(document)
    with pytest.raises(ValidationError):
        controller.reposition()
    with pytest.raises(ValidationError):
        controller.start_positioning()


def test_reset_is_idempotent(controller, signature, document) -> None:
    _positioned(controller, signature)
    controller.apply(document)
    controller.reset()
    controller.reset()
    assert controller.mode is PlacementMode.IDLE
    assert controller.position == DEFAULT_POSITION
    assert controller.artifact is None
    assert controller.selected == signature
