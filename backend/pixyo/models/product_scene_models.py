"""
Product Scenes API 요청 모델

제품 분석 결과는 분석 모델이 돌려준 snake_case JSON 그대로 주고받는다.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pixyo.models.design_models import ProductImage
from pixyo.models.profile_models import ApiModel

SceneAspectRatio = Literal["1:1", "4:3", "16:9", "9:16"]
Confidence = Literal["low", "medium", "high"]
VerticalPosition = Literal["floor", "low_furniture", "table_height", "shelf", "counter", "wall_mounted"]


# ===== 제품 분석 =====

class AnalysisModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class FocalLength(AnalysisModel):
    estimated_mm: float
    category: Literal["wide", "normal", "light_telephoto", "telephoto"]
    confidence: Optional[Confidence] = None


class CameraInfo(AnalysisModel):
    focal_length: FocalLength


class ProductInfo(AnalysisModel):
    category: str
    type: str
    type_german: str
    brand: Optional[str] = None


class PlacementInfo(AnalysisModel):
    vertical_position: VerticalPosition
    surface_type: str


class EnvironmentInfo(AnalysisModel):
    primary_rooms: List[str]
    primary_rooms_german: List[str]
    outdoor_suitable: Optional[bool] = None


class ProductAnalysis(AnalysisModel):
    """analyze-product 결과 (장면/배경 생성 요청에 그대로 전달)"""
    analysis_version: Optional[str] = None
    confidence_overall: Optional[Confidence] = None
    camera: CameraInfo
    product: ProductInfo
    placement: PlacementInfo
    environment: EnvironmentInfo

    @property
    def known_brand(self) -> Optional[str]:
        brand = self.product.brand
        return brand if brand and brand != "unknown" else None


# ===== 요청 =====

class LabeledProductImage(ProductImage):
    label: Optional[str] = None


class ProductPlacement(ApiModel):
    """상대 위치 (0-1)와 화면 대비 크기"""
    x: float = Field(..., ge=0, le=1)
    y: float = Field(..., ge=0, le=1)
    scale: float = Field(..., ge=0.1, le=1)


class AnalyzeProductRequest(ApiModel):
    product_image: ProductImage


class GenerateProductSceneRequest(ApiModel):
    """제품 사진 1-3장 + 장면 설명으로 제품 장면 생성"""
    product_image: Optional[LabeledProductImage] = None
    product_images: Optional[List[LabeledProductImage]] = Field(default=None, min_length=1, max_length=3)
    background_prompt: str = Field(..., min_length=1)
    aspect_ratio: SceneAspectRatio = "1:1"
    image_size: Literal["1K", "2K", "4K"] = "2K"
    # -2 (작게) ~ +2 (크게)
    product_scale_level: int = Field(default=0, ge=-2, le=2)
    reference_image: Optional[ProductImage] = None
    product_analysis: Optional[ProductAnalysis] = None
    floor_plan_image: Optional[ProductImage] = None
    floor_plan_description: Optional[str] = None
    prompt_source: Literal["ai-improved", "user-direct"] = "user-direct"

    @model_validator(mode="after")
    def require_product_image(self) -> "GenerateProductSceneRequest":
        if not self.product_image and not self.product_images:
            raise ValueError("Either productImage or productImages must be provided")
        return self

    def normalized_images(self) -> List[LabeledProductImage]:
        """productImages가 있으면 우선, 없으면 단일 productImage"""
        if self.product_images:
            return list(self.product_images)
        return [self.product_image] if self.product_image else []


class RecontextProductRequest(ApiModel):
    product_image: ProductImage
    background_prompt: str = Field(..., min_length=1)
    aspect_ratio: SceneAspectRatio = "1:1"


class GenerateBackgroundRequest(ApiModel):
    """제품 없이 합성용 배경만 생성"""
    background_prompt: str = Field(..., min_length=1)
    aspect_ratio: SceneAspectRatio = "1:1"
    lens_type: Literal["wide", "normal", "tele"] = "normal"
    layout_image: Optional[ProductImage] = None
    product_image: Optional[ProductImage] = None
    reference_image: Optional[ProductImage] = None
    product_placement: Optional[ProductPlacement] = None
    product_analysis: Optional[ProductAnalysis] = None


class HarmonizeCompositeRequest(ApiModel):
    composite_image: ProductImage
    aspect_ratio: SceneAspectRatio = "1:1"


class GenerateScenePromptsRequest(ApiModel):
    user_prompt: str = Field(..., min_length=1)
    product_type: Optional[str] = None
    product_brand: Optional[str] = None
