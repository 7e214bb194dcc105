"""
AI 작업별 예상 비용(EUR)과 모델 이름

입력/출력 토큰과 이미지를 포함한 대략적인 단가이다.
"""

from typing import Dict

AI_COSTS_EUR: Dict[str, float] = {
    # Product Scenes
    "analyze-product": 0.005,
    "generate-product-scene": 0.03,
    "generate-product-scene-vertex": 0.04,
    "generate-background": 0.03,
    "harmonize-composite": 0.03,
    "generate-scene-prompts": 0.015,
    # Social Graphics
    "generate-prompt": 0.015,
    "generate-image": 0.03,
    "generate-text": 0.015,
    # Brand Design
    "brand-design-generate": 0.02,
}

AI_MODELS: Dict[str, str] = {
    "analyze-product": "gemini-2.0-flash",
    "generate-product-scene": "gemini-3-pro-image",
    "generate-product-scene-vertex": "vertex-ai-imagen",
    "generate-background": "gemini-3-pro-image",
    "harmonize-composite": "gemini-3-pro-image",
    "generate-scene-prompts": "claude-sonnet-4",
    "generate-prompt": "claude-sonnet-4",
    "generate-image": "gemini-3-pro-image",
    "generate-text": "claude-sonnet-4.5",
    "brand-design-generate": "claude-sonnet-4.5",
}


def get_operation_cost(operation: str) -> float:
    return AI_COSTS_EUR.get(operation, 0.0)


def get_operation_model(operation: str) -> str:
    return AI_MODELS.get(operation, "unknown")
