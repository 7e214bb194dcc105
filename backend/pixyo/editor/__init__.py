from pixyo.editor.layers import (
    ASPECT_RATIOS,
    BackgroundLayer,
    BaseLayer,
    CanvasState,
    ImageLayer,
    Layer,
    LogoLayer,
    RectLayer,
    TextLayer,
    parse_layer,
)
from pixyo.editor.store import EditorStore, LayerHistory

__all__ = [
    "ASPECT_RATIOS",
    "BackgroundLayer",
    "BaseLayer",
    "CanvasState",
    "EditorStore",
    "ImageLayer",
    "Layer",
    "LayerHistory",
    "LogoLayer",
    "RectLayer",
    "TextLayer",
    "parse_layer",
]
