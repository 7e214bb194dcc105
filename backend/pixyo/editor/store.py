"""
캔버스 에디터 상태 저장소

레이어 목록, 선택 상태, 실행 취소/다시 실행 이력을 보관한다.
하나의 편집 세션이 단독으로 소유하며 스레드 간에 공유하지 않는다.
모든 변경 명령은 동기적으로 한 번에 적용된다.
"""

import time
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pixyo.editor.layers import (
    BACKGROUND_LAYER_ID,
    DEFAULT_ASPECT_RATIO,
    BackgroundLayer,
    BaseLayer,
    CanvasState,
    LogoLayer,
    TextLayer,
    dump_layer,
    field_aliases,
    is_background,
    parse_layer,
    parse_layers,
)

HISTORY_LIMIT = 50
DUPLICATE_OFFSET = 20
LOGO_MAX_SIZE = 200
LOGO_EDGE_OFFSET = 100
OVERLAY_OPACITY_MAX = 100.0

LayerSnapshot = Tuple[BaseLayer, ...]


def generate_layer_id() -> str:
    """layer_{밀리초}_{랜덤 7자}"""
    return f"layer_{int(time.time() * 1000)}_{uuid.uuid4().hex[:7]}"


class LayerHistory:
    """레이어 스냅샷 시퀀스와 커서로 구성된 선형 이력"""

    def __init__(self, initial: LayerSnapshot, limit: int = HISTORY_LIMIT):
        self.limit = limit
        self._snapshots: List[LayerSnapshot] = [initial]
        self._cursor = 0

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def record(self, snapshot: LayerSnapshot) -> None:
        """새 스냅샷 추가. 커서 이후의 미래 이력은 버린다"""
        del self._snapshots[self._cursor + 1:]
        self._snapshots.append(snapshot)
        # 되돌릴 수 있는 단계는 limit 개까지
        if len(self._snapshots) > self.limit + 1:
            del self._snapshots[0]
        self._cursor = len(self._snapshots) - 1

    def undo(self) -> Optional[LayerSnapshot]:
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._snapshots[self._cursor]

    def redo(self) -> Optional[LayerSnapshot]:
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._snapshots[self._cursor]

    def reset(self, initial: LayerSnapshot) -> None:
        self._snapshots = [initial]
        self._cursor = 0


class EditorStore:
    """에디터 상태 저장소"""

    def __init__(
        self,
        aspect_ratio: str = DEFAULT_ASPECT_RATIO,
        id_factory: Optional[Callable[[], str]] = None,
        history_limit: int = HISTORY_LIMIT
    ):
        self._id_factory = id_factory or generate_layer_id
        self._initial_aspect_ratio = aspect_ratio
        self.canvas = CanvasState.for_aspect_ratio(aspect_ratio)
        self.selected_layer_id: Optional[str] = None
        self.overlay_opacity = 0.0
        self._layers: LayerSnapshot = ()
        self._history = LayerHistory(self._layers, history_limit)

    # ===== 조회 =====

    @property
    def layers(self) -> List[BaseLayer]:
        """페인트 순서(첫 번째가 맨 아래)의 레이어 목록 사본"""
        return list(self._layers)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def background(self) -> Optional[BaseLayer]:
        for layer in self._layers:
            if is_background(layer):
                return layer
        return None

    def get_layer(self, layer_id: str) -> Optional[BaseLayer]:
        index = self._index_of(layer_id)
        return None if index is None else self._layers[index]

    def _index_of(self, layer_id: str) -> Optional[int]:
        for index, layer in enumerate(self._layers):
            if layer.id == layer_id:
                return index
        return None

    def _commit(self, layers: List[BaseLayer]) -> bool:
        """
        레이어 목록 교체 및 이력 기록

        변화가 없으면 기록하지 않으므로 undo 직후의 no-op 명령은 redo 이력을 지우지 않는다.
        """
        snapshot = tuple(layers)
        if snapshot == self._layers:
            return False
        self._layers = snapshot
        self._history.record(snapshot)
        return True

    # ===== 레이어 명령 =====

    def add_layer(self, layer: Union[BaseLayer, Dict[str, Any]]) -> BaseLayer:
        """레이어 추가 후 선택. 배경 레이어는 기존 배경을 대체하고 맨 아래에 놓인다"""
        layer = parse_layer(layer)
        layers = list(self._layers)

        if is_background(layer):
            layers = [layer] + [item for item in layers if not is_background(item)]
            if any(item.id == layer.id for item in layers[1:]):
                raise ValueError(f"Layer id already exists: {layer.id}")
            self._commit(layers)
        else:
            if self._index_of(layer.id) is not None:
                raise ValueError(f"Layer id already exists: {layer.id}")
            layers.append(layer)
            self._commit(layers)

        self.selected_layer_id = layer.id
        return layer

    def update_layer(self, layer_id: str, updates: Dict[str, Any]) -> None:
        """필드 병합. id가 없으면 아무것도 하지 않는다 (삭제와 경합하는 UI 호출 대비)"""
        index = self._index_of(layer_id)
        if index is None:
            return

        layer = self._layers[index]
        aliases = field_aliases(layer)
        data = dump_layer(layer)
        for key, value in updates.items():
            alias = aliases.get(key, key)
            if alias in ("id", "type"):
                continue
            data[alias] = value

        layers = list(self._layers)
        layers[index] = type(layer).model_validate(data)
        self._commit(layers)

    def remove_layer(self, layer_id: str) -> None:
        """레이어 삭제. 배경 레이어는 삭제할 수 없다"""
        index = self._index_of(layer_id)
        if index is None or is_background(self._layers[index]):
            return

        layers = list(self._layers)
        del layers[index]
        self._commit(layers)
        if self.selected_layer_id == layer_id:
            self.selected_layer_id = None

    def duplicate_layer(self, layer_id: str) -> Optional[BaseLayer]:
        """새 id로 복제해 원본 바로 위에 삽입하고 선택"""
        index = self._index_of(layer_id)
        if index is None or is_background(self._layers[index]):
            return None

        source = self._layers[index]
        clone = source.model_copy(update={
            "id": self._id_factory(),
            "x": source.x + DUPLICATE_OFFSET,
            "y": source.y + DUPLICATE_OFFSET,
        })
        layers = list(self._layers)
        layers.insert(index + 1, clone)
        self._commit(layers)
        self.selected_layer_id = clone.id
        return clone

    def reorder_layer(self, layer_id: str, new_index: int) -> None:
        """레이어 이동 (범위로 보정). 배경은 항상 0번 자리를 유지한다"""
        index = self._index_of(layer_id)
        if index is None or is_background(self._layers[index]):
            return

        lower = 1 if self.background is not None else 0
        upper = len(self._layers) - 1
        target = max(lower, min(new_index, upper))
        if target == index:
            return

        layers = list(self._layers)
        layer = layers.pop(index)
        layers.insert(target, layer)
        self._commit(layers)

    def move_layer_up(self, layer_id: str) -> None:
        index = self._index_of(layer_id)
        if index is not None:
            self.reorder_layer(layer_id, index + 1)

    def move_layer_down(self, layer_id: str) -> None:
        index = self._index_of(layer_id)
        if index is not None:
            self.reorder_layer(layer_id, index - 1)

    def select_layer(self, layer_id: Optional[str]) -> None:
        if layer_id is None or self._index_of(layer_id) is not None:
            self.selected_layer_id = layer_id

    # ===== 이력 =====

    def undo(self) -> bool:
        snapshot = self._history.undo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def redo(self) -> bool:
        snapshot = self._history.redo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def _restore(self, snapshot: LayerSnapshot) -> None:
        self._layers = snapshot
        if self.selected_layer_id is not None and self._index_of(self.selected_layer_id) is None:
            self.selected_layer_id = None

    # ===== 레이어 생성 헬퍼 =====

    def set_background_image(self, src: str, width: float, height: float) -> BackgroundLayer:
        """캔버스를 덮도록 배율을 맞춰 가운데 정렬한 배경 설정"""
        canvas_ratio = self.canvas.width / self.canvas.height
        image_ratio = width / height

        if image_ratio > canvas_ratio:
            # 가로가 더 긴 이미지는 높이 기준
            scale = self.canvas.height / height
        else:
            scale = self.canvas.width / width

        background = BackgroundLayer(
            id=BACKGROUND_LAYER_ID,
            src=src,
            x=(self.canvas.width - width * scale) / 2,
            y=(self.canvas.height - height * scale) / 2,
            width=width,
            height=height,
            scale_x=scale,
            scale_y=scale,
            locked=True,
        )
        layers = [background] + [layer for layer in self._layers if not is_background(layer)]
        self._commit(layers)
        return background

    def add_text_layer(self, text: str = "Dein Text") -> TextLayer:
        layer = TextLayer(
            id=self._id_factory(),
            text=text,
            x=self.canvas.width / 2,
            y=self.canvas.height / 2,
            font_family="Inter",
            font_size=48,
            font_weight="bold",
            fill="#ffffff",
            align="center",
            line_height=1.2,
        )
        self.add_layer(layer)
        return layer

    def add_logo_layer(
        self,
        src: str,
        width: float,
        height: float,
        is_svg: bool = False
    ) -> LogoLayer:
        """200px을 넘는 로고는 축소해 오른쪽 아래에 배치"""
        scale = 1.0
        if width > LOGO_MAX_SIZE or height > LOGO_MAX_SIZE:
            scale = LOGO_MAX_SIZE / max(width, height)

        layer = LogoLayer(
            id=self._id_factory(),
            src=src,
            x=self.canvas.width - LOGO_EDGE_OFFSET,
            y=self.canvas.height - LOGO_EDGE_OFFSET,
            width=width,
            height=height,
            scale_x=scale,
            scale_y=scale,
            is_svg=is_svg,
            background_shape="none",
            background_padding=10,
        )
        self.add_layer(layer)
        return layer

    # ===== 캔버스 =====

    def set_aspect_ratio(self, ratio: str) -> None:
        self.canvas = CanvasState.for_aspect_ratio(ratio, self.canvas.background_color)

    def set_background_color(self, color: str) -> None:
        self.canvas = self.canvas.model_copy(update={"background_color": color})

    def set_overlay_opacity(self, opacity: float) -> None:
        self.overlay_opacity = max(0.0, min(OVERLAY_OPACITY_MAX, float(opacity)))

    def reset(self) -> None:
        """초기 상태로 되돌리고 이력을 비운다"""
        self.canvas = CanvasState.for_aspect_ratio(self._initial_aspect_ratio)
        self.selected_layer_id = None
        self.overlay_opacity = 0.0
        self._layers = ()
        self._history.reset(self._layers)

    # ===== 직렬화 =====

    def to_document(self) -> Dict[str, Any]:
        """디자인 저장 API 형식 (canvasState, layers, overlayOpacity)"""
        return {
            "canvasState": self.canvas.model_dump(by_alias=True),
            "layers": [dump_layer(layer) for layer in self._layers],
            "overlayOpacity": self.overlay_opacity,
        }

    @classmethod
    def from_document(
        cls,
        document: Dict[str, Any],
        id_factory: Optional[Callable[[], str]] = None
    ) -> "EditorStore":
        """저장된 디자인에서 저장소 복원 (복원 상태가 이력의 시작점)"""
        canvas = CanvasState.model_validate(document.get("canvasState") or {})
        store = cls(id_factory=id_factory)
        store.canvas = canvas
        store.overlay_opacity = float(document.get("overlayOpacity") or 0.0)

        layers = parse_layers(document.get("layers") or [])
        backgrounds = [layer for layer in layers if is_background(layer)]
        others = [layer for layer in layers if not is_background(layer)]
        store._layers = tuple(backgrounds[:1] + others)
        store._history.reset(store._layers)
        return store
