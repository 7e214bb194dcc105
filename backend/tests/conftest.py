"""
테스트 설정 및 픽스처

임시 SQLite(aiosqlite) 데이터베이스와 외부 서비스 대역을 앱 의존성에 연결한다.
"""

import base64
from io import BytesIO
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from PIL import Image as PILImage

from pixyo.api.deps import (
    get_blob_storage,
    get_claude_service,
    get_image_service,
    get_unsplash_service,
)
from pixyo.core.config import settings
from pixyo.core.security import create_access_token
from pixyo.db.base import Base
from pixyo.db.models import *  # noqa: F401,F403
from pixyo.db.session import Database, get_db, get_session_factory
from pixyo.main import create_app
from pixyo.services.ai.claude_service import ClaudeService
from pixyo.services.ai.gemini_image_service import GeminiImageService
from pixyo.services.blob_storage import LocalBlobStorage
from pixyo.services.unsplash_service import UnsplashService

TEST_BLOB_BASE_URL = "http://testserver/blobs"
TEST_UNSPLASH_URL = "https://unsplash.test"


def make_png(width: int = 8, height: int = 8, color=(255, 0, 0)) -> bytes:
    """테스트용 PNG 바이트"""
    output = BytesIO()
    PILImage.new("RGB", (width, height), color).save(output, format="PNG")
    return output.getvalue()


class FakeGenaiClient:
    """
    google-genai Client 대역

    기본은 inline 이미지 한 장. text를 지정하면 텍스트 응답, error를 지정하면 호출 시 발생.
    """

    def __init__(
        self,
        image_bytes: Optional[bytes] = None,
        text: Optional[str] = None,
        error: Optional[Exception] = None,
        finish_reason: Optional[str] = None,
    ):
        self.image_bytes = image_bytes if image_bytes is not None else make_png()
        self.text = text
        self.error = error
        self.finish_reason = finish_reason
        self.calls: List[Dict[str, Any]] = []
        self.models = SimpleNamespace(
            generate_content=self._generate_content,
            recontext_image=self._recontext_image,
        )

    def _generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.text is not None:
            part = SimpleNamespace(inline_data=None, text=self.text)
        else:
            inline_data = SimpleNamespace(data=self.image_bytes, mime_type="image/png")
            part = SimpleNamespace(inline_data=inline_data, text=None)
        parts = [] if self.finish_reason else [part]
        candidate = SimpleNamespace(content=SimpleNamespace(parts=parts), finish_reason=self.finish_reason)
        return SimpleNamespace(candidates=[candidate])

    def _recontext_image(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        image = SimpleNamespace(image_bytes=self.image_bytes, mime_type="image/png")
        return SimpleNamespace(generated_images=[SimpleNamespace(image=image)])


class UnsplashStub:
    """Unsplash 응답을 테스트마다 바꿀 수 있는 MockTransport 핸들러"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"total": 0, "total_pages": 0, "results": []}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


# ===== 데이터베이스 =====

@pytest.fixture
async def database(tmp_path):
    """테스트마다 새로 만드는 SQLite 데이터베이스"""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def blob_storage(tmp_path) -> LocalBlobStorage:
    return LocalBlobStorage(
        root_dir=str(tmp_path / "blobs"),
        public_base_url=TEST_BLOB_BASE_URL,
        url_marker="/blobs/",
    )


# ===== 외부 서비스 대역 =====

@pytest.fixture
def genai_client() -> FakeGenaiClient:
    return FakeGenaiClient()


@pytest.fixture
def image_service(genai_client) -> GeminiImageService:
    return GeminiImageService(api_key="test-key", mock_mode=False, client=genai_client, timeout_seconds=5)


@pytest.fixture
def claude_service() -> ClaudeService:
    return ClaudeService(api_key="", mock_mode=True)


@pytest.fixture
def unsplash_stub() -> UnsplashStub:
    return UnsplashStub()


@pytest.fixture
def unsplash_service(unsplash_stub) -> UnsplashService:
    return UnsplashService(
        access_key="test-access-key",
        api_url=TEST_UNSPLASH_URL,
        transport=httpx.MockTransport(unsplash_stub),
    )


# ===== 애플리케이션 =====

@pytest.fixture
def app(database, blob_storage, image_service, claude_service, unsplash_service):
    application = create_app()

    async def override_get_db():
        async with database.session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_session_factory] = lambda: database.session_factory
    application.dependency_overrides[get_blob_storage] = lambda: blob_storage
    application.dependency_overrides[get_image_service] = lambda: image_service
    application.dependency_overrides[get_claude_service] = lambda: claude_service
    application.dependency_overrides[get_unsplash_service] = lambda: unsplash_service
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest.fixture
def auth_headers() -> Callable[..., Dict[str, str]]:
    """Bearer 토큰 헤더 생성기"""

    def build(
        user_id: str = "user-1",
        email: Optional[str] = "user-1@example.com",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, str]:
        token = create_access_token(user_id, email=email, server_metadata=metadata)
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
def admin_headers(auth_headers) -> Dict[str, str]:
    return auth_headers("admin-1", email="admin@example.com", metadata={"role": "admin"})


@pytest.fixture
def api_prefix() -> str:
    return settings.API_PREFIX


# ===== 샘플 데이터 =====

@pytest.fixture
def sample_profile_data() -> Dict[str, Any]:
    return {
        "name": "Café Müller",
        "colors": {"dark": "#1a1a1a", "light": "#ffffff", "accent": "#c41e3a"},
        "fonts": {
            "headline": {"family": "Inter", "size": 48, "weight": "bold", "uppercase": False},
            "body": {"family": "Inter", "size": 18, "weight": "normal"},
        },
        "layout": {
            "padding": {"top": 60, "right": 60, "bottom": 60, "left": 60},
            "gaps": {"taglineToHeadline": 20, "headlineToBody": 30, "bodyToButton": 40},
            "button": {"radius": 8, "paddingX": 24, "paddingY": 12},
        },
        "systemPrompt": "Warm coffee house atmosphere",
    }


@pytest.fixture
def sample_design_data() -> Dict[str, Any]:
    return {
        "name": "Sommer-Aktion",
        "canvasState": {"width": 1080, "height": 1080, "aspectRatio": "1:1", "backgroundColor": "#1a1a1a"},
        "layers": [
            {
                "id": "background",
                "type": "background",
                "src": "https://images.example.com/bg.jpg",
                "width": 2000,
                "height": 1000,
                "scaleX": 1.08,
                "scaleY": 1.08,
                "locked": True,
            },
            {
                "id": "layer_1_abcdefg",
                "type": "text",
                "text": "Hallo",
                "fontFamily": "Inter",
                "fontSize": 48,
                "fill": "#ffffff",
            },
        ],
        "overlayOpacity": 30,
    }


def png_data_url(data: Optional[bytes] = None) -> str:
    return "data:image/png;base64," + base64.b64encode(data or make_png()).decode("ascii")
