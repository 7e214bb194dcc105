"""
브랜드 프로필 API 요청 모델

요청/응답 필드는 camelCase, 내부 속성은 snake_case를 사용한다.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class ApiModel(BaseModel):
    """camelCase 별칭을 쓰는 요청 모델 기본 클래스"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """요청에 포함된 필드만 camelCase 딕셔너리로"""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


# ===== 프로필 구성 요소 =====

class ProfileColors(ApiModel):
    dark: str
    light: str
    accent: str


class FontSpec(ApiModel):
    family: str
    size: Number
    weight: Optional[str] = None
    uppercase: Optional[bool] = None

    @field_validator("weight", mode="before")
    @classmethod
    def coerce_weight(cls, value: Union[str, int, float, None]) -> Optional[str]:
        # DB에 숫자(700)로 저장된 값 허용
        if value is None or isinstance(value, str):
            return value
        return str(int(value)) if float(value).is_integer() else str(value)


class ProfileFonts(ApiModel):
    headline: FontSpec
    body: FontSpec


class LayoutPadding(ApiModel):
    top: Number
    right: Number
    bottom: Number
    left: Number


class LayoutGaps(ApiModel):
    tagline_to_headline: Number
    headline_to_body: Number
    body_to_button: Number


class ButtonSpec(ApiModel):
    radius: Number
    padding_x: Number
    padding_y: Number


class ProfileLayout(ApiModel):
    padding: LayoutPadding
    gaps: LayoutGaps
    button: ButtonSpec


class LogoVariants(ApiModel):
    dark: str
    light: str


# ===== 요청 =====

class ProfileCreateRequest(ApiModel):
    """프로필 생성 요청 (slug 생략 시 이름에서 생성)"""
    name: str = Field(..., min_length=1)
    slug: Optional[str] = None
    logo: str = ""
    colors: ProfileColors
    fonts: ProfileFonts
    layout: ProfileLayout
    system_prompt: str = ""


class ProfileUpdateRequest(ApiModel):
    """프로필 부분 수정 요청 (DB에서 온 느슨한 값 허용)"""
    name: Optional[str] = Field(default=None, min_length=1)
    logo: Optional[str] = None
    logo_variants: Optional[LogoVariants] = None
    colors: Optional[ProfileColors] = None
    fonts: Optional[ProfileFonts] = None
    layout: Optional[ProfileLayout] = None
    system_prompt: Optional[str] = None
    design_tokens: Optional[Dict[str, Any]] = None


class AdminProfileCreateRequest(ProfileCreateRequest):
    """관리자용: 소유자를 직접 지정"""
    user_id: str = Field(..., min_length=1)


class AdminProfileUpdateRequest(ProfileUpdateRequest):
    user_id: Optional[str] = Field(default=None, min_length=1)


class LogoUploadRequest(ApiModel):
    svg_data: str = Field(..., min_length=1)
    filename: Optional[str] = None


class BrandDesignGenerateRequest(ApiModel):
    """브랜드 설명으로 부분 디자인 토큰 생성"""
    prompt: str = Field(..., min_length=1)
    current_tokens: Optional[Dict[str, Any]] = None
