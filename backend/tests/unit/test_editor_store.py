"""
캔버스 에디터 저장소 단위 테스트
"""

import itertools

import pytest

from pixyo.editor.layers import BACKGROUND_LAYER_ID, BackgroundLayer, CanvasState, TextLayer
from pixyo.editor.store import EditorStore, LayerHistory


@pytest.fixture
def store():
    counter = itertools.count(1)
    return EditorStore(id_factory=lambda: f"layer_{next(counter)}")


def _text(layer_id: str, text: str = "Hallo") -> TextLayer:
    return TextLayer(id=layer_id, text=text, font_family="Inter", font_size=48, fill="#ffffff")


@pytest.mark.unit
class TestBackgroundLayer:
    """배경 레이어 보호 테스트"""

    def test_background_cover_scaling(self, store):
        """가로가 긴 이미지는 높이에 맞춰 가운데 정렬"""
        # When
        background = store.set_background_image("bg.jpg", width=2000, height=1000)

        # Then
        assert background.id == BACKGROUND_LAYER_ID
        assert background.scale_x == pytest.approx(1.08)
        assert background.x == pytest.approx((1080 - 2000 * 1.08) / 2)
        assert background.y == pytest.approx(0)
        assert store.layers[0] is background

    def test_new_background_replaces_old_and_stays_first(self, store):
        # Given
        store.add_text_layer("A")
        store.set_background_image("one.jpg", 1080, 1080)

        # When
        store.set_background_image("two.jpg", 1080, 1080)

        # Then
        backgrounds = [layer for layer in store.layers if layer.type == "background"]
        assert len(backgrounds) == 1
        assert store.layers[0].src == "two.jpg"

    def test_background_cannot_be_removed_duplicated_or_moved(self, store):
        # Given
        store.set_background_image("bg.jpg", 1080, 1080)
        text = store.add_text_layer()

        # When
        store.remove_layer(BACKGROUND_LAYER_ID)
        duplicate = store.duplicate_layer(BACKGROUND_LAYER_ID)
        store.reorder_layer(BACKGROUND_LAYER_ID, 1)
        store.reorder_layer(text.id, 0)

        # Then
        assert duplicate is None
        assert [layer.id for layer in store.layers] == [BACKGROUND_LAYER_ID, text.id]


@pytest.mark.unit
class TestLayerCommands:
    """레이어 추가/복제/수정 테스트"""

    def test_duplicate_inserts_above_with_offset(self, store):
        # Given
        first = store.add_layer(_text("a"))
        store.add_layer(_text("b"))

        # When
        clone = store.duplicate_layer(first.id)

        # Then
        assert clone.id == "layer_1"
        assert (clone.x, clone.y) == (first.x + 20, first.y + 20)
        assert [layer.id for layer in store.layers] == ["a", "layer_1", "b"]
        assert store.selected_layer_id == clone.id

    def test_duplicate_id_rejected(self, store):
        store.add_layer(_text("a"))
        with pytest.raises(ValueError):
            store.add_layer(_text("a"))

    def test_update_merges_fields_and_ignores_unknown_id(self, store):
        # Given
        store.add_layer(_text("a"))

        # When
        store.update_layer("a", {"text": "Neu", "font_size": 64, "type": "image"})
        store.update_layer("missing", {"text": "x"})

        # Then
        layer = store.get_layer("a")
        assert layer.type == "text"
        assert layer.text == "Neu"
        assert layer.font_size == 64

    def test_logo_is_scaled_down_to_max_size(self, store):
        logo = store.add_logo_layer("logo.svg", width=800, height=400, is_svg=True)
        assert logo.scale_x == pytest.approx(0.25)
        assert (logo.x, logo.y) == (980, 980)

    def test_overlay_opacity_is_clamped(self, store):
        store.set_overlay_opacity(150)
        assert store.overlay_opacity == 100
        store.set_overlay_opacity(-5)
        assert store.overlay_opacity == 0

    def test_added_background_is_selected(self, store):
        store.add_layer(_text("a"))

        background = store.add_layer(BackgroundLayer(id="bg-1", src="bg.jpg", width=1080, height=1080))

        assert store.selected_layer_id == background.id
        assert [layer.id for layer in store.layers] == ["bg-1", "a"]


@pytest.mark.unit
class TestLayerOrder:
    """레이어 순서 변경과 선택 테스트"""

    @pytest.fixture
    def stacked(self, store):
        store.set_background_image("bg.jpg", 1080, 1080)
        for layer_id in ("a", "b", "c"):
            store.add_layer(_text(layer_id))
        return store

    @staticmethod
    def _ids(store):
        return [layer.id for layer in store.layers]

    def test_reorder_clamps_to_range(self, stacked):
        # When
        stacked.reorder_layer("a", 99)

        # Then
        assert self._ids(stacked) == [BACKGROUND_LAYER_ID, "b", "c", "a"]

        # When
        stacked.reorder_layer("a", -5)

        # Then
        assert self._ids(stacked) == [BACKGROUND_LAYER_ID, "a", "b", "c"]

    def test_move_up_and_down(self, stacked):
        # When
        stacked.move_layer_up("a")

        # Then
        assert self._ids(stacked) == [BACKGROUND_LAYER_ID, "b", "a", "c"]

        # When
        stacked.move_layer_down("a")
        stacked.move_layer_down("a")
        stacked.move_layer_up("c")

        # Then
        assert self._ids(stacked) == [BACKGROUND_LAYER_ID, "a", "b", "c"]

    def test_moves_at_the_edges_are_not_recorded(self, stacked):
        stacked.undo()
        stacked.move_layer_down("a")
        stacked.move_layer_up("b")

        assert stacked.can_redo is True

    def test_reorder_without_background_allows_bottom(self, store):
        store.add_layer(_text("a"))
        store.add_layer(_text("b"))

        store.reorder_layer("b", -5)

        assert self._ids(store) == ["b", "a"]

    def test_select_layer(self, stacked):
        # When
        stacked.select_layer("a")
        stacked.select_layer("gibt-es-nicht")

        # Then
        assert stacked.selected_layer_id == "a"

        stacked.select_layer(None)
        assert stacked.selected_layer_id is None


@pytest.mark.unit
class TestHistory:
    """실행 취소/다시 실행 테스트"""

    def test_undo_redo_restores_layers(self, store):
        # Given
        store.add_layer(_text("a"))
        store.add_layer(_text("b"))

        # When / Then
        assert store.undo() is True
        assert [layer.id for layer in store.layers] == ["a"]
        assert store.redo() is True
        assert [layer.id for layer in store.layers] == ["a", "b"]
        assert store.redo() is False

    def test_new_change_clears_redo(self, store):
        # Given
        store.add_layer(_text("a"))
        store.add_layer(_text("b"))
        store.undo()

        # When
        store.add_layer(_text("c"))

        # Then
        assert store.can_redo is False
        assert [layer.id for layer in store.layers] == ["a", "c"]

    def test_noop_mutation_is_not_recorded(self, store):
        store.add_layer(_text("a"))
        store.update_layer("a", {"text": "Hallo"})
        assert store.undo() is True
        assert store.can_undo is False

    def test_noop_after_undo_keeps_redo(self, store):
        # Given
        store.add_layer(_text("a"))
        store.add_layer(_text("b"))
        store.undo()

        # When
        store.update_layer("a", {"text": "Hallo"})
        store.remove_layer("gibt-es-nicht")

        # Then
        assert store.can_redo is True
        assert store.redo() is True
        assert [layer.id for layer in store.layers] == ["a", "b"]

    def test_history_is_bounded(self):
        history = LayerHistory((), limit=3)
        for index in range(10):
            history.record((_text(f"l{index}"),))

        steps = 0
        while history.undo() is not None:
            steps += 1
        assert steps == 3

    def test_undo_clears_selection_of_missing_layer(self, store):
        layer = store.add_layer(_text("a"))
        assert store.selected_layer_id == layer.id
        store.undo()
        assert store.selected_layer_id is None


@pytest.mark.unit
class TestCanvas:
    """캔버스 설정과 문서 변환 테스트"""

    def test_aspect_ratio_sets_dimensions(self, store):
        store.set_background_color("#ff0000")
        store.set_aspect_ratio("9:16")
        assert (store.canvas.width, store.canvas.height) == (1080, 1920)
        assert store.canvas.background_color == "#ff0000"

    def test_unknown_aspect_ratio_rejected(self, store):
        with pytest.raises(ValueError):
            store.set_aspect_ratio("3:2")

    def test_document_roundtrip_keeps_background_first(self):
        # Given
        document = {
            "canvasState": CanvasState.for_aspect_ratio("4:5").model_dump(by_alias=True),
            "layers": [
                {"id": "t", "type": "text", "text": "x", "fontFamily": "Inter", "fontSize": 20, "fill": "#000"},
                {"id": "background", "type": "background", "src": "bg.jpg", "width": 10, "height": 10},
            ],
            "overlayOpacity": 40,
        }

        # When
        store = EditorStore.from_document(document)
        restored = store.to_document()

        # Then
        assert [layer["id"] for layer in restored["layers"]] == ["background", "t"]
        assert restored["canvasState"]["aspectRatio"] == "4:5"
        assert restored["overlayOpacity"] == 40
        assert store.can_undo is False

    def test_reset_clears_everything(self, store):
        store.add_text_layer()
        store.set_overlay_opacity(50)
        store.reset()
        assert store.layers == []
        assert store.overlay_opacity == 0
        assert store.can_undo is False
