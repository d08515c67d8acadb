import pytest

from auth.models import TokenPair
from tests.api_helpers import RecordingEffects, RecordingTokenStore


@pytest.fixture
def token_store() -> RecordingTokenStore:
    return RecordingTokenStore(TokenPair("A1", "R1"))


@pytest.fixture
def effects() -> RecordingEffects:
    return RecordingEffects()


@pytest.fixture
def document_payload() -> dict:
    return {
        "success": True,
        "message": "Document retrieved",
        "data": {
            "message": "ok",
            "document": {
                "id": "doc-1",
                "title": "Quality Manual",
                "documentNumber": "QM-001",
                "status": "APPROVED",
                "securityLevel": "INTERNAL",
                "isConfidential": False,
            },
        },
        "timestamp": "2024-05-01T10:00:00Z",
        "path": "/documents/doc-1",
        "duration": "12ms",
    }
